"""Lesson Calendar package.

Scheduling & attendance core of the group app, organized by feature modules
(holidays, calendar, attendance, reschedule, ...) with a thin Flask controller
layer over service/repository layers.
"""
