from app.models.profile import Profile
from app.models.trip import AccessRequest, City, Trip, TripCity, TripMember
from app.models.itinerary import (
    ItineraryItem,
    ItineraryItemVote,
    ItinerarySection,
    ItineraryTemplate,
    ItineraryTemplateItem,
)
from app.models.planning import NoteTag, Tag, Task, TaskTag, TaskVote, TripNote
from app.models.poll import TripVote, TripVoteOption, TripVotePoll
from app.models.group import (
    Group,
    GroupMember,
    GroupPlan,
    GroupPlanIdea,
    GroupPlanIdeaVote,
    GroupPlanReadiness,
)
from app.models.social import Comment, Invitation, Like, Notification
from app.models.budget import Expense
from app.models.form import Feedback, Form, FormQuestion, FormResponse

__all__ = [
    "AccessRequest",
    "City",
    "Comment",
    "Expense",
    "Feedback",
    "Form",
    "FormQuestion",
    "FormResponse",
    "Group",
    "GroupMember",
    "GroupPlan",
    "GroupPlanIdea",
    "GroupPlanIdeaVote",
    "GroupPlanReadiness",
    "Invitation",
    "ItineraryItem",
    "ItineraryItemVote",
    "ItinerarySection",
    "ItineraryTemplate",
    "ItineraryTemplateItem",
    "Like",
    "NoteTag",
    "Notification",
    "Profile",
    "Tag",
    "Task",
    "TaskTag",
    "TaskVote",
    "Trip",
    "TripCity",
    "TripMember",
    "TripNote",
    "TripVote",
    "TripVoteOption",
    "TripVotePoll",
]
