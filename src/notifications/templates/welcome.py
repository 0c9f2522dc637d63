"""Account templates — email-only account mail and coach verification outcomes.

These types are context-free: everything they show comes from metadata.
"""


class EmailOnlyTemplate:
    """In-app placeholder for messages whose content lives in the email."""

    notification_types = ("welcome", "email_verification", "password_reset")

    @staticmethod
    def render(request, context) -> dict:
        return {
            "title": request.notification_type,
            "message": "This notification is email-only.",
            "data": {},
        }


class CoachVerificationApprovedTemplate:
    notification_types = ("coach_verification_approved",)

    @staticmethod
    def render(request, context) -> dict:
        return {
            "title": "notifications:coach_verification_approved.title",
            "message": "notifications:coach_verification_approved.message",
            "data": {},
        }


class CoachVerificationRejectedTemplate:
    notification_types = ("coach_verification_rejected",)

    @staticmethod
    def render(request, context) -> dict:
        return {
            "title": "notifications:coach_verification_rejected.title",
            "message": "notifications:coach_verification_rejected.message",
            "data": {
                "rejection_reason": request.metadata.get("rejection_reason")
                or "Please review our verification requirements.",
            },
        }


class VerificationExpiringSoonTemplate:
    notification_types = ("verification_expiring_soon",)

    @staticmethod
    def render(request, context) -> dict:
        return {
            "title": "notifications:verification_expiring_soon.title",
            "message": "notifications:verification_expiring_soon.message",
            "data": {"expiry_date": request.metadata.get("expiry_date") or "soon"},
        }
