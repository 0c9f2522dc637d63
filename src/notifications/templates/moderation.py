"""Moderation templates — warnings, hidden content, suspensions and report outcomes."""


def _keys(notification_type):
    return f"notifications:{notification_type}.title", f"notifications:{notification_type}.message"


class UserAccountWarningTemplate:
    notification_types = ("user_account_warning",)

    @staticmethod
    def render(request, context) -> dict:
        title, message = _keys(request.notification_type)
        metadata = request.metadata
        return {
            "title": title,
            "message": message,
            "data": {
                "auditId": metadata.get("auditId"),
                "flag_reason_translation": metadata.get("flag_reason_translation") or "general_guideline_violation",
                "warning_count": metadata.get("warning_count") or 1,
            },
        }


class UserContentHiddenTemplate:
    notification_types = ("user_content_hidden",)

    @staticmethod
    def render(request, context) -> dict:
        title, message = _keys(request.notification_type)
        metadata = request.metadata
        return {
            "title": title,
            "message": message,
            "data": {
                "auditId": metadata.get("auditId"),
                "flag_reason_translation": metadata.get("flag_reason_translation") or "our policies",
                "truncated_review_comment": metadata.get("truncated_review_comment") or "[content]",
            },
        }


class AccountSuspendedTemplate:
    notification_types = ("user_account_suspended",)

    @staticmethod
    def render(request, context) -> dict:
        title, message = _keys(request.notification_type)
        metadata = request.metadata
        return {
            "title": title,
            "message": message,
            "data": {
                "auditId": metadata.get("auditId"),
                "suspension_duration": metadata.get("suspension_duration") or "a temporary period",
                "suspension_type": metadata.get("suspension_type") or "limited",
                "suspension_end_date": metadata.get("suspension_end_date") or "N/A",
                "flag_reason_translation": metadata.get("flag_reason_translation") or "our policies",
            },
        }


class ReportOutcomeTemplate:
    """Reporter learns whether their report led to action."""

    notification_types = ("report_actioned", "report_dismissed")

    @staticmethod
    def render(request, context) -> dict:
        title, message = _keys(request.notification_type)
        return {"title": title, "message": message, "data": {"auditId": request.metadata.get("auditId")}}
