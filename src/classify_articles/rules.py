"""Keyword rule tables for article classification."""

from classify_articles.models import KeywordRule

MISSION_RULES = (
    KeywordRule("Counter-UAS", ("counter-uas", "counter uas", "drone", "uav", "uas", "loitering munition")),
    KeywordRule("Joint C2", ("joint c2", "command and control", "battle management", "c2", "joint all-domain command")),
    KeywordRule("Resilient Comms", ("satcom", "communications", "network resilience", "secure comms", "tactical network")),
    KeywordRule("Contested Logistics", ("logistics", "sealift", "airlift", "sustainment", "supply route", "contested logistics")),
    KeywordRule("Force Protection", ("force protection", "air defense", "base defense", "protection", "defensive posture")),
    KeywordRule("Homeland Defense", ("homeland defense", "border security", "northcom", "domestic security")),
    KeywordRule("Industrial Base", ("industrial base", "supplier", "production line", "manufacturing", "factory", "capacity")),
    KeywordRule("Munitions", ("munitions", "missile", "rocket", "artillery shell", "precision-guided")),
    KeywordRule("Supply Chain", ("supply chain", "second source", "long lead", "component shortage", "material lead time")),
    KeywordRule("ISR", ("isr", "intelligence surveillance", "reconnaissance", "sensor payload", "surveillance")),
    KeywordRule("Autonomy", ("autonomy", "autonomous", "robot wingman", "uncrewed", "unmanned", "swarm")),
    KeywordRule("Joint Fires", ("joint fires", "strike", "targeting", "fires", "long-range fires")),
    KeywordRule("Defense Software", ("mission software", "software platform", "devsecops", "software factory", "digital platform")),
    KeywordRule("Deterrence", ("deterrence", "nuclear posture", "strategic stability", "extended deterrence")),
)

DOMAIN_RULES = (
    KeywordRule("land", ("army", "ground force", "brigade", "tank", "armored", "artillery")),
    KeywordRule("air", ("air force", "usaf", "fighter", "bomber", "aircraft", "aviation")),
    KeywordRule("maritime", ("navy", "marine corps", "maritime", "naval", "warship", "carrier", "submarine", "fleet")),
    KeywordRule("space", ("space force", "space domain", "orbital", "satellite", "launch", "leo", "geo")),
    KeywordRule("cyber", ("cyber", "cybersecurity", "network defense", "zero trust", "cyber command")),
    KeywordRule("multi-domain", ("joint force", "multi-domain", "joint all-domain", "cross-domain")),
)

TECHNOLOGY_RULES = (
    KeywordRule("SATCOM", ("satcom", "satellite communications")),
    KeywordRule("Network Orchestration", ("network orchestration", "mesh network", "software-defined network", "network command")),
    KeywordRule("Terminal Integration", ("terminal integration", "ground terminal", "user terminal", "modem integration")),
    KeywordRule("RF sensing", ("rf sensing", "radio frequency sensing", "rf sensor", "electromagnetic sensing")),
    KeywordRule("EO/IR", ("eo/ir", "electro-optical", "infrared sensor", "electro optical")),
    KeywordRule("Edge AI", ("edge ai", "onboard ai", "edge inference", "real-time ai")),
    KeywordRule("Advanced Manufacturing", ("advanced manufacturing", "additive manufacturing", "3d printing", "factory automation")),
    KeywordRule("Digital Twins", ("digital twin", "digital thread", "model-based systems engineering", "mbse")),
    KeywordRule("Propulsion", ("propulsion", "engine", "rocket motor", "turbine")),
    KeywordRule("AI/ML", ("ai/ml", "machine learning", "artificial intelligence", "ml model")),
    KeywordRule("Mission Software", ("mission software", "software update", "battle management software", "command software")),
    KeywordRule("Edge Compute", ("edge compute", "onboard compute", "distributed compute", "tactical compute")),
)

# Ties resolve in this order
CONTENT_TYPE_KEYWORDS = {
    "conflict": ("war", "strike", "attack", "combat", "battlefield", "conflict", "invasion"),
    "budget": ("budget", "appropriation", "appropriations", "spending bill", "fy", "continuing resolution"),
    "policy": ("policy", "directive", "strategy", "guidance", "executive order", "hearing", "sanctions"),
    "funding": ("funding", "fundraise", "investment", "venture", "series a", "series b", "valuation"),
    "tech": ("autonomous", "software", "cyber", "ai", "radar", "sensor", "satcom", "prototype"),
}

CONTENT_TYPE_TRACKS = {
    "funding": "capital",
    "budget": "macro",
    "policy": "macro",
    "conflict": "macro",
    "tech": "tech",
}

HIGH_IMPACT_KEYWORDS = (
    "nuclear",
    "carrier strike group",
    "contracts for",
    "hypersonic",
    "budget request",
    "deterrence",
    "missile defense",
)

MAX_MISSION_TAGS = 4
MAX_DOMAIN_TAGS = 2
MAX_TECHNOLOGY_TAGS = 5

DEFAULT_CONTENT_TYPE = "program"
DEFAULT_TRACK = "programs"
DEFAULT_DOMAIN_TAG = "multi-domain"
OFFICIAL_DEFAULT_MISSION_TAG = "Industrial Base"
