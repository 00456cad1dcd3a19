"""Roster Tracker package.

Organized by feature modules (attendees, roster, csv_io, printing) with a
thin Flask controller layer over service/repository layers. The roster and
csv_io modules are pure and have no storage dependency.
"""
