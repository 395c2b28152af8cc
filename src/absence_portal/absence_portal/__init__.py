"""Absence Portal package.

This package is organized by feature modules (users, timetables, requests, ...)
around a pure ``timeslots`` core, with a thin Flask controller layer and
service/repository layers on top.
"""
