"""
Color, shape and imprint classification tests.
"""

import pytest

from medscan.domain.services.color_classifier import classify_color, name_rgb
from medscan.domain.services.imprint_extractor import extract_imprint
from medscan.domain.services.shape_classifier import classify_shape, shape_from_outline
from medscan.domain.value_objects.vision_annotations import DominantColor, LocalizedObject, Vertex

from conftest import quad


class TestColorClassifier:
    """Palette naming of the dominant color"""

    @pytest.mark.parametrize("rgb,expected", [
        ((255, 0, 0), "red"),
        ((210, 20, 20), "red"),
        ((0, 255, 0), "green"),
        ((0, 0, 255), "blue"),
        ((255, 255, 0), "yellow"),
        ((255, 150, 0), "orange"),
        ((200, 50, 200), "purple"),
        ((250, 250, 250), "white"),
        ((10, 10, 10), "black"),
        ((128, 128, 128), "gray"),
        ((180, 120, 60), "brown"),
    ])
    def test_palette(self, rgb, expected):
        assert name_rgb(*rgb) == expected

    def test_first_rule_wins(self):
        """Pure yellow also satisfies the orange rule; yellow is checked first"""
        assert name_rgb(255, 255, 0) == "yellow"

    @pytest.mark.parametrize("rgb,expected", [
        ((100, 100, 100), "dark"),
        ((60, 60, 200), "dark"),
        ((90, 170, 160), "light"),
    ])
    def test_light_dark_fallback(self, rgb, expected):
        assert name_rgb(*rgb) == expected

    @pytest.mark.parametrize("rgb", [(210, 20, 20), (60, 60, 200), (128, 128, 128)])
    def test_repeat_calls_agree(self, rgb):
        colors = [DominantColor(red=rgb[0], green=rgb[1], blue=rgb[2])]
        assert classify_color(colors) == classify_color(colors) == name_rgb(*rgb)

    def test_uses_most_prominent_color(self):
        colors = [DominantColor(red=255, green=0, blue=0), DominantColor(red=0, green=0, blue=255)]
        assert classify_color(colors) == "red"

    def test_raw_service_dict(self):
        """The service omits zero-valued channels"""
        assert classify_color([{"color": {"red": 255}, "score": 0.5}]) == "red"

    def test_empty(self):
        assert classify_color([]) is None
        assert classify_color(None) is None

    def test_malformed_entry(self):
        assert classify_color([{"color": {"red": "not a number"}}]) is None


class TestShapeClassifier:
    """Shape from object localization"""

    def test_keyword_shapes(self):
        assert classify_shape([LocalizedObject(name="Circle", score=0.7)]) == "round"
        assert classify_shape([LocalizedObject(name="Capsule", score=0.7)]) == "capsule"
        assert classify_shape([LocalizedObject(name="Oval", score=0.7)]) == "oval"

    def test_highest_score_wins(self):
        objects = [
            LocalizedObject(name="Square", score=0.4),
            LocalizedObject(name="Triangle", score=0.9),
        ]
        assert classify_shape(objects) == "triangle"

    def test_tie_keeps_first(self):
        objects = [
            LocalizedObject(name="Rectangle", score=0.6),
            LocalizedObject(name="Circle", score=0.6),
        ]
        assert classify_shape(objects) == "rectangle"

    def test_non_shape_objects_ignored(self):
        objects = [
            LocalizedObject(name="Person", score=0.99),
            LocalizedObject(name="Circle", score=0.3),
        ]
        assert classify_shape(objects) == "round"
        assert classify_shape([LocalizedObject(name="Bottle", score=0.9)]) is None

    def test_generic_pill_uses_outline(self):
        assert classify_shape([LocalizedObject(name="Pill", score=0.8, vertices=quad(0.3, 0.3))]) == "round"
        assert classify_shape([LocalizedObject(name="Tablet", score=0.8, vertices=quad(0.6, 0.2))]) == "oval"
        assert classify_shape([LocalizedObject(name="Pill", score=0.8, vertices=quad(0.2, 0.4))]) == "rectangle"

    @pytest.mark.parametrize("width,height,expected", [
        (0.8, 1.0, "round"),
        (1.2, 1.0, "round"),
        (1.0, 1.0, "round"),
        (0.7, 1.0, "rectangle"),
        (1.3, 1.0, "rectangle"),
        (1.5, 1.0, "rectangle"),
        (2.0, 1.0, "oval"),
    ])
    def test_outline_ratio_bounds(self, width, height, expected):
        box = (Vertex(0, 0), Vertex(width, 0), Vertex(width, height), Vertex(0, height))
        assert shape_from_outline(box) == expected

    def test_higher_circle_beats_square(self):
        objects = [
            LocalizedObject(name="Square", score=0.9),
            LocalizedObject(name="Circle", score=0.95),
        ]
        assert classify_shape(objects) == "round"

    def test_repeat_calls_agree(self):
        objects = [
            LocalizedObject(name="Circle", score=0.95),
            LocalizedObject(name="Tablet", score=0.5, vertices=quad(0.6, 0.3)),
        ]
        assert classify_shape(objects) == classify_shape(objects) == "round"

    def test_outline_needs_four_vertices(self):
        assert shape_from_outline((Vertex(0, 0), Vertex(1, 0), Vertex(1, 1))) is None
        assert classify_shape([LocalizedObject(name="Pill", score=0.8)]) is None

    def test_flat_outline(self):
        flat = (Vertex(0, 0), Vertex(0.5, 0), Vertex(0.5, 0), Vertex(0, 0))
        assert shape_from_outline(flat) is None

    def test_raw_service_dict(self):
        raw = {
            "name": "Pill",
            "score": 0.9,
            "boundingPoly": {"normalizedVertices": [
                {"x": 0.1, "y": 0.1}, {"x": 0.4}, {"x": 0.4, "y": 0.4}, {"y": 0.4},
            ]},
        }
        # Missing y on the second vertex means 0, so height spans 0 to 0.4
        assert classify_shape([raw]) == "rectangle"

    def test_empty(self):
        assert classify_shape([]) is None
        assert classify_shape(None) is None


class TestImprintExtractor:
    """Picking the imprint line out of OCR text"""

    def test_prefers_code_like_line(self):
        assert extract_imprint("Take with food\nIP-204\nM 30") == "IP-204"

    @pytest.mark.parametrize("text,expected", [
        ("ABC123\nTAKE WITH FOOD", "ABC123"),
        ("ok\nHello world this is long", "ok"),
    ])
    def test_label_text(self, text, expected):
        assert extract_imprint(text) == expected
        assert extract_imprint(text) == extract_imprint(text)

    def test_case_insensitive_match_keeps_case(self):
        assert extract_imprint("apo\n500") == "apo"

    def test_falls_back_to_short_line(self):
        assert extract_imprint("This is a long sentence\nM 30") == "M 30"

    def test_too_short_or_long(self):
        assert extract_imprint("A") is None
        assert extract_imprint("ABCDEFGHIJK") is None
        assert extract_imprint("ABCDEFGHIJ") == "ABCDEFGHIJ"

    def test_lines_are_trimmed(self):
        assert extract_imprint("   \n  G3722  \n") == "G3722"

    def test_empty(self):
        assert extract_imprint("") is None
        assert extract_imprint(None) is None
