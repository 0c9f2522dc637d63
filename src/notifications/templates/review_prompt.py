"""Review prompt templates — sent to both parties after a completed session."""

from notifications.templates.booking import COACH_ROLE, recipient_role
from notifications.templates.formatting import (
    booking_fields,
    person_name,
    require_booking,
    require_coach,
)


class ReviewPromptTemplate:
    notification_types = ("review_prompt_coach", "review_prompt_client")

    @staticmethod
    def render(request, context) -> dict:
        booking = require_booking(request, context)
        coach = require_coach(request, context)
        role = recipient_role(request, booking)
        if request.notification_type == "review_prompt_coach":
            role = COACH_ROLE
        other_party = booking.user if role == COACH_ROLE else coach
        session_id = request.metadata.get("sessionId") or str(booking.id)
        return {
            "title": f"notifications:{request.notification_type}.title",
            "message": f"notifications:{request.notification_type}.message",
            "data": {
                **booking_fields(booking),
                "sessionId": session_id,
                "reviewUrl": f"/sessions/{session_id}/review",
                "name": person_name(other_party, "The other party"),
            },
        }
