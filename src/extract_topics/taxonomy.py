"""Curated topic taxonomy."""

from extract_topics.models import TaxonomyTopic
from extract_topics.slug import slugify_topic

# (label, topic_type, aliases, context-gated aliases)
_TAXONOMY_SEED = (
    (
        "Department of Defense",
        "organization",
        ("DoD", "D.o.D.", "U.S. Department of Defense", "US Department of Defense", "Department of War"),
        ("DOW",),
    ),
    ("Small Business Innovation Research", "program", ("SBIR", "SBIR program"), ()),
    ("Defense Advanced Research Projects Agency", "organization", ("DARPA",), ()),
    ("Defense Innovation Unit", "organization", ("DIU",), ()),
    ("U.S. Air Force", "organization", ("USAF", "Air Force"), ()),
    ("U.S. Navy", "organization", ("US Navy", "Navy"), ()),
    ("U.S. Army", "organization", ("US Army", "Army"), ()),
    ("U.S. Marine Corps", "organization", ("USMC", "Marines", "Marine Corps"), ()),
    ("U.S. Space Force", "organization", ("USSF", "Space Force"), ()),
    ("North Atlantic Treaty Organization", "organization", ("NATO",), ()),
    ("U.S. Indo-Pacific Command", "organization", ("INDOPACOM",), ()),
    ("U.S. Central Command", "organization", ("CENTCOM",), ()),
    ("Joint All-Domain Command and Control", "program", ("JADC2", "Joint C2"), ()),
    ("Replicator Initiative", "program", ("Replicator",), ()),
    ("Foreign Military Sales", "program", ("FMS",), ()),
    ("AUKUS", "program", ("AUKUS partnership",), ()),
    ("Golden Dome", "program", ("Golden Dome missile shield",), ()),
    ("Hypersonics", "technology", ("hypersonic", "hypersonic weapons"), ()),
    ("Counter-UAS", "technology", ("counter drone", "counter-UAS", "C-UAS"), ()),
    ("Artificial Intelligence", "technology", ("AI", "AI/ML", "machine learning"), ()),
    ("Satellite Communications", "technology", ("SATCOM",), ()),
    ("Missile Defense", "technology", ("air and missile defense",), ()),
    ("Cybersecurity", "technology", ("cyber", "zero trust"), ()),
    ("Anduril Industries", "company", ("Anduril",), ()),
    ("Palantir Technologies", "company", ("Palantir",), ()),
    ("Lockheed Martin", "company", ("Lockheed",), ()),
    ("RTX", "company", ("Raytheon", "RTX Corp"), ()),
    ("Northrop Grumman", "company", ("Northrop",), ()),
    ("Boeing Defense", "company", ("Boeing",), ()),
    ("General Dynamics", "company", ("GD", "GDIT"), ()),
    ("L3Harris", "company", ("L3 Harris", "L3Harris Technologies"), ()),
    ("Leidos", "company", ("Leidos Holdings",), ()),
    ("Huntington Ingalls Industries", "company", ("HII", "Huntington Ingalls"), ()),
    ("AeroVironment", "company", ("AeroVironment Inc",), ()),
    ("Kratos Defense & Security Solutions", "company", ("Kratos Defense", "Kratos"), ()),
    ("CACI International", "company", ("CACI",), ()),
    ("Middle East", "geography", ("Gulf region",), ()),
    ("Indo-Pacific", "geography", ("Indopacific", "Asia-Pacific"), ()),
    ("Ukraine", "geography", ("Ukrainian",), ()),
    ("Russia", "geography", ("Russian",), ()),
    ("China", "geography", ("PRC",), ()),
)

TAXONOMY: tuple[TaxonomyTopic, ...] = tuple(
    TaxonomyTopic(
        label=label,
        slug=slugify_topic(label),
        topic_type=topic_type,
        aliases=aliases,
        context_gated_aliases=gated,
    )
    for label, topic_type, aliases, gated in _TAXONOMY_SEED
)

TAXONOMY_SLUGS = frozenset(topic.slug for topic in TAXONOMY)
