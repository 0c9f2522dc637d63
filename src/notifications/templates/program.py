"""Program templates — purchases, sales, comments, submissions and completion."""

from notifications.errors import ContentGenerationError
from notifications.templates.formatting import format_amount, resolve_currency


def _require_program(request, context):
    if context.program is None:
        raise ContentGenerationError(f"'{request.notification_type}' needs a program but none was resolved")
    return context.program


class ProgramPurchaseTemplate:
    notification_types = ("program_purchase_confirmed", "program_sale_coach")

    @staticmethod
    def render(request, context) -> dict:
        program = _require_program(request, context)
        data = {
            "programId": str(program.id),
            "programTitle": program.title or "your program",
            "amount": format_amount(request.metadata),
            "currency": resolve_currency(request.metadata),
            "paymentStatus": "completed",
            "status": "completed",
        }
        if request.notification_type == "program_sale_coach":
            data["clientName"] = request.metadata.get("clientName") or "A new student"
        return {
            "title": f"notifications:{request.notification_type}.title",
            "message": f"notifications:{request.notification_type}.message",
            "data": data,
        }


class ProgramActivityTemplate:
    """Comments, replies, reviews and submissions inside a program."""

    notification_types = (
        "program_comment_posted",
        "program_comment_reply",
        "new_program_review",
        "program_assignment_submitted",
        "program_completed",
    )

    @staticmethod
    def render(request, context) -> dict:
        program = _require_program(request, context)
        metadata = request.metadata
        return {
            "title": f"notifications:{request.notification_type}.title",
            "message": f"notifications:{request.notification_type}.message",
            "data": {
                "programId": str(program.id),
                "programTitle": program.title,
                "lessonId": metadata.get("lessonId"),
                "commentId": metadata.get("commentId"),
                "reviewId": metadata.get("reviewId"),
                "authorName": metadata.get("authorName") or metadata.get("clientName") or "Someone",
                "lessonTitle": metadata.get("lessonTitle"),
            },
        }
