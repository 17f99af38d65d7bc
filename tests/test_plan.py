"""Unit tests for the emission plan.

WHY: The plan decides which bundles a page carries and in what order.
Order matters: the highlighter must load before the script that applies
it, and the MathJax configuration before MathJax itself.

RULES:
- Plans are checked both as instruction lists and as assembled output
"""

import pytest

from md2html_converter.config import GENERATOR
from md2html_converter.core.assembler import Open, Trusted, Untrusted, assemble
from md2html_converter.core.escape import EscapeContext
from md2html_converter.core.models import AssetSlot, AssetSource, SourceKind
from md2html_converter.core.plan import (
    BODY_ASSETS,
    HEAD_ASSETS,
    Gate,
    Gates,
    build_plan,
    required_slots,
)

NO_EXTRAS = Gates(include_fonts=False, has_code=False, has_math=False)
EVERYTHING = Gates(include_fonts=True, has_code=True, has_math=True)


def _sources(slots, overrides=None):
    """Stand-in sources whose content names the slot."""
    overrides = overrides or {}
    sources = {}
    for slot in slots:
        if slot in overrides:
            sources[slot] = AssetSource(slot, SourceKind.OVERRIDE, overrides[slot], path=None)
        else:
            sources[slot] = AssetSource(slot, SourceKind.EMBEDDED, "/*{}*/".format(slot.name))
    return sources


class TestGates:

    def test_always_is_open(self):
        assert NO_EXTRAS.is_open(Gate.ALWAYS)

    @pytest.mark.parametrize("gate", [Gate.FONTS, Gate.CODE, Gate.MATH])
    def test_optional_gates_follow_flags(self, gate):
        assert not NO_EXTRAS.is_open(gate)
        assert EVERYTHING.is_open(gate)


class TestRequiredSlots:

    def test_only_base_css_without_extras(self):
        assert required_slots(NO_EXTRAS) == [AssetSlot.BASE_CSS]

    def test_all_slots_in_document_order(self):
        expected = [slot for _, slot in HEAD_ASSETS + BODY_ASSETS]
        assert required_slots(EVERYTHING) == expected
        assert set(expected) == set(AssetSlot)

    def test_code_brings_highlighter_and_apply_script(self):
        slots = required_slots(Gates(include_fonts=False, has_code=True, has_math=False))
        assert slots == [
            AssetSlot.BASE_CSS,
            AssetSlot.HIGHLIGHT_JS,
            AssetSlot.HIGHLIGHT_CSS,
            AssetSlot.HIGHLIGHT_CODE_JS,
        ]

    def test_math_config_precedes_mathjax(self):
        slots = required_slots(Gates(include_fonts=False, has_code=False, has_math=True))
        assert slots.index(AssetSlot.MATHJAX_CONFIG_JS) < slots.index(AssetSlot.MATHJAX_JS)


class TestBuildPlan:

    def test_minimal_page(self):
        html = assemble(build_plan("T", "<p>x</p>", NO_EXTRAS, _sources(required_slots(NO_EXTRAS))))
        assert html.startswith(b"<!DOCTYPE html><html><head><meta charset=UTF-8>")
        assert '<meta name="generator" content="{}"/>'.format(GENERATOR).encode() in html
        assert b"<title>T</title><style>/*BASE_CSS*/</style></head>" in html
        assert html.endswith(b'<body><article class="markdown-body"><p>x</p></article></body></html>')

    def test_title_is_untrusted_text(self):
        plan = build_plan("<x>", "", NO_EXTRAS, _sources(required_slots(NO_EXTRAS)))
        assert Untrusted("<x>", EscapeContext.TEXT) in plan
        assert b"<title>&lt;x&gt;</title>" in assemble(plan)

    def test_fragment_is_trusted(self):
        plan = build_plan("T", "<p>x</p>", NO_EXTRAS, _sources(required_slots(NO_EXTRAS)))
        assert Trusted("<p>x</p>") in plan

    def test_override_becomes_untrusted_in_its_context(self):
        sources = _sources([AssetSlot.BASE_CSS], {AssetSlot.BASE_CSS: "a{}"})
        plan = build_plan("T", "", NO_EXTRAS, sources)
        assert Untrusted("a{}", EscapeContext.STYLE) in plan

    def test_script_override_uses_script_context(self):
        gates = Gates(include_fonts=False, has_code=True, has_math=False)
        sources = _sources(required_slots(gates), {AssetSlot.HIGHLIGHT_JS: "hl()"})
        plan = build_plan("T", "", gates, sources)
        assert Untrusted("hl()", EscapeContext.SCRIPT) in plan

    def test_body_scripts_follow_article(self):
        html = assemble(build_plan("T", "<p>x</p>", EVERYTHING, _sources(required_slots(EVERYTHING))))
        article_end = html.index(b"</article>")
        assert html.index(b"/*WEBFONT_JS*/") > article_end
        assert html.index(b"/*HIGHLIGHT_CODE_JS*/") > html.index(b"/*WEBFONT_JS*/")
        assert html.index(b"/*MATHJAX_JS*/") < html.index(b"</head>")

    def test_css_slots_use_style_and_js_slots_use_script(self):
        plan = build_plan("T", "", EVERYTHING, _sources(required_slots(EVERYTHING)))
        opened = [instruction.name for instruction in plan if isinstance(instruction, Open)]
        assert opened.count("style") == 4
        assert opened.count("script") == 5

    def test_missing_source_raises_key_error(self):
        with pytest.raises(KeyError):
            build_plan("T", "", EVERYTHING, _sources([AssetSlot.BASE_CSS]))
