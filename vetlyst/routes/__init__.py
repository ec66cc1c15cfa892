# Routes package init
"""
Vetlyst Backend — API Routes Package
======================================

Route Inventory:
    - clinics.py:     GET  /api/clinics              (search/filter/sort directory)
                      GET  /api/clinics/{slug}       (clinic detail by slug)
                      GET  /api/cities               (city filter options)
    - submissions.py: POST /api/appointment-request  (pet owner → clinic)
                      POST /api/claim-clinic         (staff → admin)
    - admin.py:       GET  /api/appointments, /api/admin/appointments
                      GET  /api/claims, /api/admin/claims
    - health.py:      GET  /health

Design Principle:
    Routes are THIN: parse the request, call a service, shape the response.
"""
