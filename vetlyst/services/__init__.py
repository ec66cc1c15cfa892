# Services package init
"""
Vetlyst Backend — Services Layer
==================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
Why:   Routes handle HTTP, services handle business rules.

Service Inventory:
    - slug: Clinic slug encode/decode/resolve
    - ClinicService: Directory listing, city list, slug-addressed detail
    - SubmissionService: Validate → persist workflow for appointments and claims
    - NotificationService: Best-effort emails after a submission is committed
    - EmailSender (abstract) / ResendEmailSender: Email provider seam
    - importer: CSV → clinics table (used by the CLI)
"""
