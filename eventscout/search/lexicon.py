"""Keyword tables for strategy generation and event classification.

Strategy tables map the industry/topic selections offered to users onto
search keywords that tend to surface professional events. Classification
tables drive the normalizer's best-effort category, event-type, virtual and
free detection. All lookups against the classification tables are
case-insensitive substring matches over title + description.
"""

# Ticketmaster's "Miscellaneous" segment; professional conferences rarely carry a better one
MISC_CLASSIFICATION_ID = "KZFzniwnSyZfZ7v7n1"
MISC_CLASSIFICATION_NAME = "Miscellaneous"

DEFAULT_EVENT_TYPES = ["conference", "summit", "workshop"]

INDUSTRY_STRATEGIES: dict[str, dict] = {
    "Technology": {
        "keywords": ["technology conference", "tech summit", "innovation conference", "digital conference"],
        "event_types": ["conference", "summit", "meetup", "workshop"],
    },
    "Finance": {
        "keywords": ["finance conference", "fintech summit", "investment conference", "banking conference"],
        "event_types": ["conference", "summit", "forum"],
    },
    "Healthcare": {
        "keywords": ["medical device conference", "healthcare summit", "health innovation conference"],
        "event_types": ["conference", "summit", "symposium"],
    },
    "Education": {
        "keywords": ["education conference", "learning summit", "edtech conference"],
        "event_types": ["conference", "summit", "workshop"],
    },
    "Business": {
        "keywords": ["business conference", "leadership summit", "entrepreneurship event"],
        "event_types": ["conference", "summit", "forum"],
    },
    "Marketing": {
        "keywords": ["marketing conference", "digital marketing summit", "brand conference"],
        "event_types": ["conference", "summit", "workshop"],
    },
    "Data & Analytics": {
        "keywords": ["data analytics conference", "big data summit", "data science conference"],
        "event_types": ["conference", "summit", "meetup"],
    },
    "Design": {
        "keywords": ["design conference", "UX summit", "design thinking conference"],
        "event_types": ["conference", "workshop", "meetup"],
    },
    "Manufacturing": {
        "keywords": ["manufacturing conference", "industrial summit", "industry 4.0 event"],
        "event_types": ["conference", "trade show", "workshop"],
    },
    "Retail": {
        "keywords": ["retail conference", "e-commerce summit", "commerce conference"],
        "event_types": ["conference", "trade show"],
    },
    "Government": {
        "keywords": ["government conference", "public sector summit", "policy conference"],
        "event_types": ["conference", "forum"],
    },
    "Nonprofit": {
        "keywords": ["nonprofit conference", "social impact summit", "NGO conference"],
        "event_types": ["conference", "summit", "forum"],
    },
}

for _entry in INDUSTRY_STRATEGIES.values():
    _entry.setdefault("classification_id", MISC_CLASSIFICATION_ID)
    _entry.setdefault("classification_name", MISC_CLASSIFICATION_NAME)

TOPIC_STRATEGIES: dict[str, dict] = {
    # Technology
    "Artificial Intelligence & Machine Learning": {
        "keywords": ["AI conference", "machine learning summit", "artificial intelligence event"],
    },
    "Artificial Intelligence": {
        "keywords": ["AI conference", "artificial intelligence summit", "machine learning event"],
        "event_types": ["conference", "summit", "workshop", "meetup"],
    },
    "Machine Learning": {
        "keywords": ["ML conference", "machine learning summit", "data science event"],
        "event_types": ["conference", "summit", "workshop", "meetup"],
    },
    "Cloud Computing & Infrastructure": {
        "keywords": ["cloud computing conference", "infrastructure summit", "cloud technology event"],
    },
    "Cybersecurity & Data Protection": {
        "keywords": ["cybersecurity conference", "data protection summit", "security event"],
    },
    "Cybersecurity": {
        "keywords": ["cybersecurity conference", "security summit", "cyber conference"],
    },
    "Software Development & Engineering": {
        "keywords": ["software development conference", "engineering summit", "programming event"],
    },
    "Data Science & Analytics": {
        "keywords": ["data science conference", "analytics summit", "big data event"],
    },
    "Data Science": {
        "keywords": ["data science conference", "analytics summit", "data conference"],
    },
    "DevOps & Automation": {
        "keywords": ["devops conference", "automation summit", "devops event"],
    },
    "Web Development & Frontend": {
        "keywords": ["web development conference", "frontend summit", "web technology event"],
    },
    "Blockchain & Distributed Systems": {
        "keywords": ["blockchain conference", "distributed systems summit", "cryptocurrency event"],
    },
    "IoT & Connected Devices": {
        "keywords": ["IoT conference", "connected devices summit", "internet of things event"],
    },
    "User Experience (UX) Design": {
        "keywords": ["UX design conference", "user experience summit", "UX event"],
    },
    "Product Management & Strategy": {
        "keywords": ["product management conference", "strategy summit", "product event"],
    },
    "Agile & Scrum Methodologies": {
        "keywords": ["agile conference", "scrum summit", "agile methodology event"],
    },
    # Finance
    "Fintech Innovation & Digital Banking": {
        "keywords": ["fintech conference", "digital banking summit", "financial technology event"],
    },
    "Cryptocurrency & Blockchain Technology": {
        "keywords": ["cryptocurrency conference", "blockchain summit", "crypto event"],
    },
    "Risk Management & Regulatory Compliance": {
        "keywords": ["risk management conference", "compliance summit", "regulatory event"],
    },
    "Sustainable Finance & ESG Investing": {
        "keywords": ["sustainable finance conference", "ESG investing summit", "sustainable finance event"],
    },
    # Healthcare
    "Digital Health & Telemedicine": {
        "keywords": ["digital health conference", "telemedicine summit", "health technology event"],
    },
    "Medical Device Innovation": {
        "keywords": ["medical device conference", "medtech summit", "medical technology event"],
        "event_types": ["conference", "summit", "seminar"],
    },
    "Healthcare AI & Machine Learning": {
        "keywords": ["healthcare AI conference", "AI in healthcare summit", "healthcare AI event"],
    },
    "Mental Health Technology": {
        "keywords": ["mental health conference", "mental health technology summit", "mental health event"],
    },
    # Education
    "EdTech Solutions & Digital Learning": {
        "keywords": ["edtech conference", "digital learning summit", "education technology event"],
    },
    "STEM Education & Innovation": {
        "keywords": ["STEM education conference", "STEM innovation summit", "STEM education event"],
    },
    "Higher Education & Research": {
        "keywords": ["higher education conference", "university research summit", "higher education event"],
    },
    # Business
    "Leadership Development & Management": {
        "keywords": ["leadership conference", "management development summit", "leadership event"],
    },
    "Leadership": {
        "keywords": ["leadership conference", "management summit", "executive conference"],
        "event_types": ["conference", "summit", "forum"],
    },
    "Customer Experience & Service": {
        "keywords": ["customer experience conference", "customer service summit", "CX event"],
    },
    "Digital Transformation": {
        "keywords": ["digital transformation conference", "digital business summit", "digital transformation event"],
    },
    "Innovation & Entrepreneurship": {
        "keywords": ["innovation conference", "entrepreneurship summit", "startup event"],
    },
    # Marketing
    "Digital Marketing & Strategy": {
        "keywords": ["digital marketing conference", "marketing strategy summit", "digital marketing event"],
    },
    "Digital Marketing": {
        "keywords": ["digital marketing conference", "online marketing summit", "social media conference"],
    },
    "Content Marketing & Creation": {
        "keywords": ["content marketing conference", "content creation summit", "content marketing event"],
    },
    "Search Engine Optimization (SEO)": {
        "keywords": ["SEO conference", "search optimization summit", "SEO event"],
    },
    # Data & Analytics
    "Business Intelligence & Analytics": {
        "keywords": ["business intelligence conference", "analytics summit", "BI event"],
    },
    "Data Visualization & Storytelling": {
        "keywords": ["data visualization conference", "data storytelling summit", "data viz event"],
    },
    "Big Data & Data Engineering": {
        "keywords": ["big data conference", "data engineering summit", "big data event"],
    },
    "Data Ethics & Responsible AI": {
        "keywords": ["data ethics conference", "responsible AI summit", "data ethics event"],
    },
    # Design
    "Design Thinking & Process": {
        "keywords": ["design thinking conference", "design process summit", "design thinking event"],
    },
    "Accessibility & Inclusive Design": {
        "keywords": ["accessibility conference", "inclusive design summit", "accessible design event"],
    },
    "Design Systems & Standards": {
        "keywords": ["design systems conference", "design standards summit", "design systems event"],
    },
}

# Words that describe the kind of gathering rather than its subject
GENERIC_EVENT_TERMS = frozenset({
    "conference", "conferences", "summit", "event", "events", "meetup", "workshop",
    "symposium", "convention", "seminar", "forum", "meeting", "expo", "webinar",
})

CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "Technology": [
        "technology", "tech", "software", "ai", "artificial intelligence", "machine learning",
        "data", "cloud", "cyber", "developer", "programming", "devops", "blockchain",
    ],
    "Healthcare": ["health", "healthcare", "medical", "medicine", "pharma", "clinical", "biotech", "wellness"],
    "Education": ["education", "learning", "teaching", "school", "university", "academic", "edtech"],
    "Business": [
        "business", "finance", "marketing", "sales", "leadership", "management",
        "entrepreneur", "startup", "fintech", "banking",
    ],
    "Science": ["science", "research", "physics", "chemistry", "biology", "scientific"],
    "Arts": ["art", "arts", "music", "design", "creative", "film", "theatre", "theater"],
    "Environment": ["environment", "climate", "sustainability", "green", "energy", "renewable"],
}
DEFAULT_CATEGORY = "General"

# Order matters: more specific phrases before the words they contain
EVENT_TYPE_KEYWORDS: list[tuple[str, str]] = [
    ("trade show", "Trade Show"),
    ("conference", "Conference"),
    ("summit", "Summit"),
    ("workshop", "Workshop"),
    ("seminar", "Seminar"),
    ("webinar", "Webinar"),
    ("symposium", "Symposium"),
    ("exhibition", "Exhibition"),
    ("expo", "Expo"),
    ("meetup", "Meetup"),
    ("meeting", "Meeting"),
]
DEFAULT_EVENT_TYPE = "Event"

VIRTUAL_KEYWORDS = ["virtual", "online", "webinar", "zoom", "teams", "live stream", "livestream", "streaming", "digital event"]

FREE_KEYWORDS = ["free", "no cost", "complimentary", "gratis", "no charge", "zero cost"]

CURRENCY_SYMBOLS = {"$": "USD", "€": "EUR", "£": "GBP", "¥": "JPY", "₹": "INR"}

ORGANIZER_TLDS = ("co.uk", "com.au", "com", "org", "net", "edu", "gov", "de", "fr", "ca", "io")
