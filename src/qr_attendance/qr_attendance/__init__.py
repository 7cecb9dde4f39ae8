"""QR Attendance package.

Feature modules (qr, attendance, activities, participants) follow a thin Flask
controller layer over service/repository layers; storage is injected.
"""
