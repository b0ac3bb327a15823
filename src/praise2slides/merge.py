# merge.py
"""Copy the template slide into the target deck and fill in its placeholder text."""
# pyright: reportAttributeAccessIssue=false
# mypy: disable-error-code="import-untyped"

from __future__ import annotations

import copy
import logging
from io import BytesIO
from typing import Iterator

from pptx import presentation
from pptx.opc.constants import RELATIONSHIP_TYPE as RT
from pptx.oxml.ns import qn
from pptx.shapes.group import GroupShape
from pptx.shapes.shapetree import SlideShapes
from pptx.slide import Slide, SlideLayout
from pptx.text.text import TextFrame
from pptx.text.text import _Paragraph as Paragraph_pptx
from pptx.text.text import _Run

from praise2slides.errors import MergeError
from praise2slides.internals import constants
from praise2slides.internals.run_context import get_pipeline_run_id
from praise2slides.models import SubmissionRow

log = logging.getLogger("praise2slides")

# Namespace of r:id / r:embed / r:link attributes inside slide XML
_R_NS = "{http://schemas.openxmlformats.org/officeDocument/2006/relationships}"

# Relationships that belong to the slide itself rather than to its shapes
_SLIDE_OWNED_RELTYPES = {RT.SLIDE_LAYOUT, RT.NOTES_SLIDE}

# Paragraph children that sit between runs; a placeholder never spans them
_RUN_BOUNDARY_TAGS = {qn("a:br"), qn("a:fld")}


# region create_praise_slide
def create_praise_slide(
    template_slide: Slide,
    target_prs: presentation.Presentation,
    row: SubmissionRow,
) -> Slide:
    """Append a copy of the template slide to the target deck with this submission's text filled in."""
    try:
        new_slide = append_slide(target_prs, template_slide)
        replace_all_text(new_slide, constants.TEACHER_NAME_PLACEHOLDER, row.teacher_name)
        replace_all_text(new_slide, constants.PRAISE_PLACEHOLDER, row.praise)
        replace_all_text(new_slide, constants.FROM_NAME_PLACEHOLDER, row.from_name)
    except Exception as e:
        log.error(
            f"Could not create slide for submission {row.timestamp} [pipeline:{get_pipeline_run_id()}]: {e}"
        )
        raise MergeError(
            f"Failed to add slide for {row.teacher_name} (submitted {row.timestamp}): {e}"
        ) from e

    log.info(f"✅ Added slide for {row.teacher_name}")
    return new_slide


# endregion


# region append_slide
def append_slide(target_prs: presentation.Presentation, template_slide: Slide) -> Slide:
    """
    Append a structural copy of `template_slide` to the end of `target_prs`.

    The template may live in another deck. Shapes are deep-copied; pictures and
    external hyperlinks get fresh relationships in the target. The template slide
    itself is left untouched.

    Raises MergeError before touching the target when a shape depends on a part we
    can't copy (charts, media, links to other slides).
    """
    _ensure_copyable(template_slide)

    layout = _find_matching_layout(target_prs, template_slide.slide_layout)
    new_slide = target_prs.slides.add_slide(layout)

    # add_slide() fills the layout's placeholders; the template's own shapes replace them.
    for placeholder in list(new_slide.placeholders):
        element = placeholder.element
        element.getparent().remove(element)

    rid_map = _copy_shape_relationships(template_slide, new_slide)

    for shape in template_slide.shapes:
        new_element = copy.deepcopy(shape.element)
        _remap_relationship_ids(new_element, rid_map)
        new_slide.shapes._spTree.insert_element_before(new_element, "p:extLst")

    return new_slide


def _find_matching_layout(
    target_prs: presentation.Presentation, template_layout: SlideLayout
) -> SlideLayout:
    """Prefer the target layout with the template layout's name, then a blank layout, then the first one."""
    layouts = list(target_prs.slide_layouts)
    if not layouts:
        raise ValueError("Target presentation has no slide layouts to build a slide from.")

    for layout in layouts:
        if layout.name == template_layout.name:
            return layout

    for layout in layouts:
        if "blank" in layout.name.lower():
            log.debug(
                f"No '{template_layout.name}' layout in target deck; using '{layout.name}'."
            )
            return layout

    log.debug(
        f"No '{template_layout.name}' or blank layout in target deck; using '{layouts[0].name}'."
    )
    return layouts[0]


def _ensure_copyable(template_slide: Slide) -> None:
    """Refuse templates whose shapes reference relationships other than pictures or external links."""
    unsupported = {
        rId: rel.reltype
        for rId, rel in template_slide.part.rels.items()
        if not _is_copyable(rel)
    }
    if not unsupported:
        return

    referenced = {
        value
        for shape in template_slide.shapes
        for node in shape.element.iter()
        for name, value in node.attrib.items()
        if name.startswith(_R_NS)
    }
    blocking = sorted(
        {unsupported[rId].rsplit("/", 1)[-1] for rId in referenced if rId in unsupported}
    )
    if blocking:
        raise MergeError(
            f"Template slide contains content that can't be copied to another slide: {', '.join(blocking)}. "
            "Use pictures, text and shapes only."
        )


def _is_copyable(rel) -> bool:  # type: ignore[no-untyped-def]
    return rel.reltype in _SLIDE_OWNED_RELTYPES or rel.is_external or rel.reltype == RT.IMAGE


def _copy_shape_relationships(template_slide: Slide, new_slide: Slide) -> dict[str, str]:
    """Recreate the template's picture and hyperlink relationships on the new slide. Returns old rId -> new rId."""
    rid_map: dict[str, str] = {}

    for rId, rel in template_slide.part.rels.items():
        if rel.reltype in _SLIDE_OWNED_RELTYPES:
            continue

        if rel.is_external:
            rid_map[rId] = new_slide.part.relate_to(
                rel.target_ref, rel.reltype, is_external=True
            )
        elif rel.reltype == RT.IMAGE:
            _, new_rId = new_slide.part.get_or_add_image_part(
                BytesIO(rel.target_part.blob)
            )
            rid_map[rId] = new_rId
        else:
            # Not referenced by any shape, or _ensure_copyable() would have refused the template.
            log.debug(f"Skipping template slide relationship {rId} ({rel.reltype}).")

    return rid_map


def _remap_relationship_ids(element, rid_map: dict[str, str]) -> None:  # type: ignore[no-untyped-def]
    """Point every r:* attribute in the copied XML at the new slide's relationships."""
    for node in element.iter():
        for attr_name, attr_value in node.attrib.items():
            if attr_name.startswith(_R_NS) and attr_value in rid_map:
                node.set(attr_name, rid_map[attr_value])


# endregion


# region replace_all_text
def replace_all_text(slide: Slide, placeholder: str, value: str) -> int:
    """
    Replace every occurrence of `placeholder` in the slide's text with `value`.

    Plain literal substitution: no escaping and no template evaluation. A placeholder
    that doesn't appear is simply not replaced. Returns how many occurrences were replaced.
    """
    count = 0
    for text_frame in iter_text_frames(slide.shapes):
        for paragraph in text_frame.paragraphs:
            count += _replace_in_paragraph(paragraph, placeholder, value)

    if count == 0:
        log.debug(f"Placeholder {placeholder!r} not found on slide.")
    return count


def _replace_in_paragraph(paragraph: Paragraph_pptx, placeholder: str, value: str) -> int:
    return sum(
        _replace_in_runs(runs, placeholder, value)
        for runs in _run_stretches(paragraph)
    )


def _run_stretches(paragraph: Paragraph_pptx) -> list[list[_Run]]:
    """Group the paragraph's runs into stretches not interrupted by a line break or field."""
    stretches: list[list[_Run]] = [[]]
    for child in paragraph._p.iterchildren():
        if child.tag == qn("a:r"):
            stretches[-1].append(_Run(child, paragraph))
        elif child.tag in _RUN_BOUNDARY_TAGS:
            stretches.append([])
    return [runs for runs in stretches if runs]


def _replace_in_runs(runs: list[_Run], placeholder: str, value: str) -> int:
    """
    Replace each match in one stretch of runs, left to right.

    PowerPoint often splits a typed placeholder over several runs. Only the runs a
    match covers are folded into the first of them, which keeps that run's formatting.
    """
    if not placeholder:
        return 0

    count = 0
    search_from = 0
    while True:
        texts = [run.text for run in runs]
        joined = "".join(texts)
        start = joined.find(placeholder, search_from)
        if start < 0:
            return count
        end = start + len(placeholder)

        run_starts = []
        offset = 0
        for text in texts:
            run_starts.append(offset)
            offset += len(text)
        first = max(i for i, s in enumerate(run_starts) if s <= start and texts[i])
        last = max(i for i, s in enumerate(run_starts) if s < end)

        prefix = texts[first][: start - run_starts[first]]
        suffix = texts[last][end - run_starts[last] :]
        runs[first].text = prefix + value + suffix
        for run in runs[first + 1 : last + 1]:
            r = run._r
            r.getparent().remove(r)
        runs = runs[: first + 1] + runs[last + 1 :]

        count += 1
        search_from = start + len(value)


def iter_text_frames(shapes: SlideShapes) -> Iterator[TextFrame]:
    """Yield every text frame on a slide, including those inside groups and table cells."""
    for shape in shapes:
        if isinstance(shape, GroupShape):
            yield from iter_text_frames(shape.shapes)
        elif shape.has_text_frame:
            yield shape.text_frame
        elif getattr(shape, "has_table", False) and shape.has_table:
            for row in shape.table.rows:
                for cell in row.cells:
                    yield cell.text_frame


# endregion
