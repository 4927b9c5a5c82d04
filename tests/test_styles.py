"""Tests for the style template registry and mood lexicon."""

from __future__ import annotations

import pytest

import styles


class TestRegistry:
    def test_five_styles_in_fixed_order(self):
        assert styles.STYLE_KEYS == [
            "iceCube", "liquidMetal", "floatingFragments", "underwaterDream", "neonGlow",
        ]

    def test_display_names(self):
        names = {key: s.name for key, s in styles.STYLES.items()}
        assert names == {
            "iceCube": "Frozen in Ice",
            "liquidMetal": "Liquid Metal",
            "floatingFragments": "Floating Fragments",
            "underwaterDream": "Underwater Dream",
            "neonGlow": "Neon Glow",
        }

    def test_default_selection_is_registered(self):
        assert styles.DEFAULT_STYLES == ["iceCube", "liquidMetal"]
        assert all(k in styles.STYLES for k in styles.DEFAULT_STYLES)

    def test_unknown_key_raises(self):
        with pytest.raises(KeyError):
            styles.get_style("watercolor")


class TestRender:
    @pytest.mark.parametrize("key", styles.STYLE_KEYS)
    @pytest.mark.parametrize("aspect_ratio", ["landscape", "portrait"])
    def test_exactly_one_format_phrase(self, key, aspect_ratio):
        text = styles.get_style(key).render("a lamp", "#000000", aspect_ratio)
        has_landscape = styles.LANDSCAPE_PHRASE in text
        has_portrait = styles.PORTRAIT_PHRASE in text
        assert has_landscape != has_portrait
        assert has_portrait == (aspect_ratio == "portrait")

    def test_unknown_aspect_renders_landscape(self):
        text = styles.get_style("neonGlow").render("a lamp", "#000000", "square")
        assert "Composed in 16:9 horizontal format" in text

    @pytest.mark.parametrize("key", styles.STYLE_KEYS)
    def test_interpolates_description_and_colors(self, key):
        text = styles.get_style(key).render("a brass desk lamp", "#AA0000, #00BB00", "landscape")
        assert "a brass desk lamp" in text
        assert "#AA0000, #00BB00" in text
        assert text == text.strip()
        assert "NO text, NO logos, NO frames." in text

    def test_render_is_deterministic(self):
        style = styles.get_style("underwaterDream")
        assert style.render("x", "#fff", "portrait") == style.render("x", "#fff", "portrait")

    def test_braces_in_description_are_kept_literally(self):
        text = styles.get_style("iceCube").render("a {logo} on {wall}", "#fff", "landscape")
        assert "CONCEPT TO TRANSFORM: a {logo} on {wall}" in text

    def test_empty_description_still_renders(self):
        text = styles.get_style("floatingFragments").render("", "#fff", "landscape")
        assert "CONCEPT TO BREAK APART: \n" in text


class TestMoods:
    def test_known_mood(self):
        assert styles.mood_phrase("bold").startswith("strong, distinctive")

    def test_unknown_mood_falls_back(self):
        assert styles.mood_phrase("grumpy") == "sophisticated and premium"
        assert styles.mood_phrase("") == styles.DEFAULT_MOOD_PHRASE

    def test_six_moods(self):
        assert set(styles.MOOD_DESCRIPTIONS) == {
            "luxury", "energetic", "minimal", "warm", "bold", "natural",
        }
