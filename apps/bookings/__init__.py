"""Bookings package.

Turns SUCCESSFUL applications into bookings on behalf of approved
officers, produces booking receipts and the booking report. Bookings have
no table of their own: the booked state lives on the applicant row and the
unit was already reserved when the application was approved.
"""
