# Keep step ids EXACTLY aligned with validation.STEP_RULES and projector keys

STEP_BRIEF = "brief"
STEP_RESEARCH = "research"
STEP_GOALS = "goals"
STEP_TARGET_AUDIENCE = "target_audience"
STEP_KEY_INSIGHT = "key_insight"
STEP_STRATEGY = "strategy"
STEP_CREATIVE = "creative"
STEP_DELIVERABLES = "deliverables"
STEP_QUANTITIES = "quantities"
STEP_MEDIA_TARGETS = "media_targets"
STEP_INFLUENCERS = "influencers"

# (id, required, label, label_short, description) - order is the list order
WIZARD_STEPS = [
    (STEP_BRIEF, True, "בריף ורקע", "בריף", "רקע על המותג והבריף שהתקבל"),
    (STEP_GOALS, True, "מטרות", "מטרות", "מטרות הקמפיין"),
    (STEP_TARGET_AUDIENCE, True, "קהל יעד", "קהל", "קהלי היעד של הקמפיין"),
    (STEP_KEY_INSIGHT, True, "תובנה", "תובנה", "תובנה מרכזית מבוססת מחקר"),
    (STEP_STRATEGY, True, "אסטרטגיה", "אסטרטגיה", "הגישה האסטרטגית והפעולות"),
    (STEP_CREATIVE, False, "קריאייטיב", "קריאייטיב", "כיוון קריאייטיבי ורפרנסים"),
    (STEP_DELIVERABLES, True, "תוצרים", "תוצרים", "מסגרת התוצרים והתכנים"),
    (STEP_QUANTITIES, True, "כמויות", "כמויות", "סיכום כמויות תוצרים ומשפיענים"),
    (STEP_MEDIA_TARGETS, True, "יעדי מדיה", "יעדים", "תקציב, צפיות, מעורבות ו-CPE"),
    (STEP_INFLUENCERS, True, "משפיענים", "משפיענים", "פרופילי משפיענים מומלצים"),
]

STEP_ORDER = [s[0] for s in WIZARD_STEPS]
FIRST_STEP = STEP_ORDER[0]

# Research runs as its own phase before the wizard opens: it owns a
# step-data slot but is not a navigable step.
STEP_DATA_SLOTS = STEP_ORDER + [STEP_RESEARCH]

# Step statuses
STATUS_PENDING = "pending"
STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"
STATUS_SKIPPED = "skipped"

STEP_STATUSES = (STATUS_PENDING, STATUS_ACTIVE, STATUS_COMPLETED, STATUS_SKIPPED)

# Version sources (surfaced in UI, not interpreted by the reducer)
SOURCE_AI = "ai"
SOURCE_RESEARCH = "research"
SOURCE_MANUAL = "manual"

VERSION_SOURCES = (SOURCE_AI, SOURCE_RESEARCH, SOURCE_MANUAL)

MAX_VERSIONS_PER_KEY = 10

# Enrichment: above this many characters a value counts as deliberate user content
USER_CONTENT_THRESHOLD = 20

DEFAULT_CURRENCY = "₪"
