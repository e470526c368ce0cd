"""Enumerated values stored as plain strings in the database."""

# ── Trips ──────────────────────────────────────────────────────────────────────

ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"
ROLE_CONTRIBUTOR = "contributor"
ROLE_VIEWER = "viewer"

TRIP_ROLES = (ROLE_ADMIN, ROLE_EDITOR, ROLE_CONTRIBUTOR, ROLE_VIEWER)

READ_ROLES = set(TRIP_ROLES)
WRITE_ROLES = {ROLE_ADMIN, ROLE_EDITOR, ROLE_CONTRIBUTOR}
MANAGE_ROLES = {ROLE_ADMIN, ROLE_EDITOR}
ADMIN_ROLES = {ROLE_ADMIN}

PRIVACY_PRIVATE = "private"
PRIVACY_SHARED_WITH_LINK = "shared_with_link"
PRIVACY_PUBLIC = "public"
PRIVACY_SETTINGS = (PRIVACY_PRIVATE, PRIVACY_SHARED_WITH_LINK, PRIVACY_PUBLIC)

TRIP_STATUSES = ("planning", "upcoming", "in_progress", "completed", "cancelled")
TRIP_TYPES = ("leisure", "business", "family", "group", "solo", "other")

PLAYLIST_DOMAINS = (
    "spotify.com",
    "music.apple.com",
    "youtube.com",
    "youtu.be",
    "soundcloud.com",
    "tidal.com",
)

# ── Itinerary ──────────────────────────────────────────────────────────────────

ITEM_SUGGESTED = "suggested"
ITEM_STATUSES = ("suggested", "confirmed", "rejected", "pending", "active")

CATEGORY_ACCOMMODATIONS = "Accommodations"
CATEGORY_TRANSPORTATION = "Transportation"
CATEGORY_ICONIC_LANDMARKS = "Iconic Landmarks"
CATEGORY_FOOD_AND_DRINK = "Food & Drink"

ITINERARY_CATEGORIES = (
    CATEGORY_ACCOMMODATIONS,
    CATEGORY_TRANSPORTATION,
    CATEGORY_ICONIC_LANDMARKS,
    CATEGORY_FOOD_AND_DRINK,
    "Local Secrets",
    "Cultural Experiences",
    "Outdoor Adventures",
    "Nightlife",
    "Shopping",
    "Day Excursions",
    "Other",
)

VOTE_UP = "up"
VOTE_DOWN = "down"
VOTE_TYPES = (VOTE_UP, VOTE_DOWN)

# ── Tasks ──────────────────────────────────────────────────────────────────────

TASK_STATUSES = ("suggested", "confirmed", "rejected", "active", "cancelled")
TASK_PRIORITIES = ("high", "medium", "low")

MAX_TAG_LENGTH = 50

# ── Groups ─────────────────────────────────────────────────────────────────────

GROUP_ROLE_ADMIN = "admin"
GROUP_ROLE_MEMBER = "member"
GROUP_ROLES = (GROUP_ROLE_ADMIN, GROUP_ROLE_MEMBER)

MEMBER_ACTIVE = "active"
MEMBER_INVITED = "invited"
MEMBER_LEFT = "left"
MEMBER_REMOVED = "removed"

GROUP_VISIBILITIES = ("private", "public", "unlisted")

IDEA_TYPES = ("destination", "date", "activity", "budget", "place", "note", "question", "other")

# Ideas of these types become itinerary items when a plan is turned into a trip
ITINERARY_IDEA_TYPES = ("activity", "place")

PLAN_BRAINSTORMING = "brainstorming"
PLAN_VOTING = "voting"
PLAN_COMPLETED = "completed"
PLAN_STATUSES = (PLAN_BRAINSTORMING, PLAN_VOTING, PLAN_COMPLETED)

DEFAULT_IDEA_POSITION = {"x": 0, "y": 0, "w": 3, "h": 2}

# ── Invitations & access ───────────────────────────────────────────────────────

INVITE_PENDING = "pending"
INVITE_ACCEPTED = "accepted"
INVITE_DECLINED = "declined"
INVITE_EXPIRED = "expired"
INVITE_REVOKED = "revoked"

INVITE_TYPE_TRIP = "trip"
INVITE_TYPE_GROUP = "group"

REQUEST_PENDING = "pending"
REQUEST_APPROVED = "approved"
REQUEST_REJECTED = "rejected"

# ── Likes, comments ────────────────────────────────────────────────────────────

LIKEABLE_TYPES = ("trip", "itinerary_item", "group_plan_idea", "destination")
COMMENTABLE_TYPES = ("trip", "itinerary_item", "group_plan_idea", "destination")

# ── Budget ─────────────────────────────────────────────────────────────────────

BUDGET_CATEGORIES = (
    "accommodation",
    "transportation",
    "food",
    "activities",
    "shopping",
    "entertainment",
    "other",
)

# ── Forms ──────────────────────────────────────────────────────────────────────

FORM_STATUSES = ("draft", "published", "archived")
FORM_VISIBILITIES = ("private", "members", "public")
FORM_TYPES = ("general", "accommodation", "transportation", "activities", "food", "feedback", "custom")
QUESTION_TYPES = ("text", "long_text", "single_choice", "multiple_choice", "rating", "yes_no", "date")

FEEDBACK_TYPES = ("bug", "feature", "general", "praise")
