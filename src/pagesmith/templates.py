"""Starting pages offered by "New" and "Load Template"."""

from typing import Callable, Optional

from pagesmith.catalog import spec_for
from pagesmith.models.node import ContainerNode, LeafNode, Page


def _section(**props) -> ContainerNode:
    section = spec_for("section").create_default()
    if props:
        section = section.model_copy(update={"props": props})
    return section


def _with_children(section: ContainerNode, *children: LeafNode) -> ContainerNode:
    return section.model_copy(update={"children": children})


def campus_fest() -> Page:
    """Event page with hero, schedule and speakers."""
    hero = _section(
        paddingY="py-20",
        background="bg-gradient-to-br from-primary/10 to-fuchsia-200/40",
        align="items-center",
    )
    hero = _with_children(
        hero,
        LeafNode(
            id=f"{hero.id}_h1",
            type="heading",
            props={"text": "EVENT BUCKET Presents: Campus Fest 2025", "level": 1, "align": "center"},
        ),
        LeafNode(
            id=f"{hero.id}_p1",
            type="paragraph",
            props={
                "text": "A week of innovation, culture, and community. "
                        "Join workshops, talks, and celebrations across campus.",
                "align": "center",
            },
        ),
        LeafNode(
            id=f"{hero.id}_b1",
            type="button",
            props={"label": "Register Now", "href": "#register"},
        ),
    )

    schedule = _section()
    schedule = _with_children(
        schedule,
        LeafNode(id=f"{schedule.id}_h2", type="heading", props={"text": "Schedule", "level": 2}),
        spec_for("schedule").create_default(),
    )

    speakers = _section()
    speakers = _with_children(
        speakers,
        LeafNode(id=f"{speakers.id}_h2", type="heading", props={"text": "Speakers", "level": 2}),
    )
    # Containers cannot nest, so the speaker columns follow the section
    columns = ContainerNode(
        id=f"{speakers.id}_c1",
        type="two-column",
        props={"gap": "gap-8"},
        children=(
            LeafNode(
                id=f"{speakers.id}_s1",
                type="speaker",
                props={"name": "Alex Kumar", "role": "Keynote", "photo": "/placeholder.svg"},
            ),
            LeafNode(
                id=f"{speakers.id}_s2",
                type="speaker",
                props={"name": "Priya Shah", "role": "Panelist", "photo": "/placeholder.svg"},
            ),
        ),
    )

    return Page((hero, schedule, speakers, columns))


def club_meet() -> Page:
    intro = _section()
    intro = _with_children(
        intro,
        LeafNode(
            id=f"{intro.id}_h",
            type="heading",
            props={"text": "Club Meet 2025", "level": 1, "align": "center"},
        ),
        LeafNode(
            id=f"{intro.id}_p",
            type="paragraph",
            props={"text": "Join your campus club for a meetup and fun activities.", "align": "center"},
        ),
    )
    workshops = _section()
    workshops = _with_children(
        workshops,
        LeafNode(id=f"{workshops.id}_h2", type="heading", props={"text": "Workshops", "level": 2}),
    )
    return Page((intro, workshops))


def speakers_lineup() -> Page:
    lineup = _section()
    lineup = _with_children(
        lineup,
        LeafNode(id=f"{lineup.id}_h", type="heading", props={"text": "Speakers Lineup", "level": 1}),
        spec_for("speaker").create_default(),
    )
    return Page((lineup,))


TEMPLATES: dict[str, Callable[[], Page]] = {
    "campus": campus_fest,
    "club": club_meet,
    "speakers": speakers_lineup,
}


def build_template(name: str) -> Optional[Page]:
    """Build a fresh copy of a named template, or None if unknown."""
    factory = TEMPLATES.get(name)
    return factory() if factory else None
