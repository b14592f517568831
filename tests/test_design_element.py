"""
Tests for the layout model: DesignElement, DesignElements, ViewLayout, Garment.

Verifies:
- Defaults for a new element
- Silent clamping of position, scale and opacity
- Raw rotation storage, normalized only on export
- Partial updates and rejected fields
- Per-view collections and paint order
"""
import pytest

from models.design_element import DesignElement, normalize_rotation
from models.view_layout import DesignElements, ViewLayout
from models.garment import Garment
from models.transform import StagePercent


# ══════════════════════════════════════════════════════════════════════════
# DesignElement
# ══════════════════════════════════════════════════════════════════════════

class TestDesignElementDefaults:

    def test_new_element_is_centered(self):
        element = DesignElement("logo.png")
        assert (element.x, element.y) == (50.0, 50.0)
        assert element.scale == 1.0
        assert element.rotation == 0.0
        assert element.opacity == 1.0

    def test_ids_are_unique(self):
        assert DesignElement("a.png").id != DesignElement("a.png").id

    def test_explicit_id_is_kept(self):
        assert DesignElement("a.png", element_id="abc").id == "abc"

    def test_position_is_tagged(self):
        element = DesignElement("a.png", x=10, y=20)
        assert element.position == StagePercent(10.0, 20.0)


class TestDesignElementClamping:
    """Out-of-range input is clamped, never rejected."""

    @pytest.mark.parametrize("field,value,expected", [
        ('x', -5, 0.0),
        ('x', 150, 100.0),
        ('y', -0.1, 0.0),
        ('y', 100.5, 100.0),
        ('scale', 0.0, 0.1),
        ('scale', 12, 5.0),
        ('opacity', -1, 0.0),
        ('opacity', 2, 1.0),
    ])
    def test_update_clamps(self, field, value, expected):
        element = DesignElement("a.png")
        element.update(**{field: value})
        assert getattr(element, field) == expected

    def test_constructor_clamps(self):
        element = DesignElement("a.png", x=-10, y=200, scale=99, opacity=3)
        assert (element.x, element.y, element.scale, element.opacity) == (0.0, 100.0, 5.0, 1.0)

    def test_rotation_is_not_clamped(self):
        element = DesignElement("a.png", rotation=-450)
        assert element.rotation == -450.0

    @pytest.mark.parametrize("rotation", [float('nan'), float('inf'), float('-inf')])
    def test_non_finite_rotation_rejected(self, rotation):
        with pytest.raises(ValueError):
            DesignElement("a.png", rotation=rotation)

    def test_rejected_update_changes_nothing(self):
        element = DesignElement("a.png", x=20, rotation=15)
        with pytest.raises(ValueError):
            element.update(x=80, scale=2, rotation=float('nan'))
        assert (element.x, element.scale, element.rotation) == (20.0, 1.0, 15.0)


class TestDesignElementUpdate:

    def test_partial_update_leaves_other_fields(self):
        element = DesignElement("a.png", x=20, y=30)
        element.update(scale=2.0)
        assert (element.x, element.y, element.scale) == (20.0, 30.0, 2.0)

    @pytest.mark.parametrize("field", ['id', 'width', 'color'])
    def test_unknown_field_rejected(self, field):
        element = DesignElement("a.png")
        before = element.to_dict()
        with pytest.raises(ValueError):
            element.update(**{field: 1})
        assert element.to_dict() == before

    def test_image_source_is_editable(self):
        element = DesignElement("a.png")
        element.update(image_source="b.png")
        assert element.image_source == "b.png"

    def test_copy_is_independent(self):
        element = DesignElement("a.png")
        clone = element.copy()
        element.update(x=10)
        assert clone.x == 50.0
        assert clone.id == element.id


class TestNormalizeRotation:

    @pytest.mark.parametrize("raw,expected", [
        (0, 0.0),
        (45, 45.0),
        (360, 0.0),
        (-90, 270.0),
        (725, 5.0),
        (-720, 0.0),
        (-1e-18, 0.0),
    ])
    def test_folds_into_range(self, raw, expected):
        folded = normalize_rotation(raw)
        assert 0.0 <= folded < 360.0
        assert folded == pytest.approx(expected)


class TestDesignElementSerialization:

    def test_to_dict_normalizes_rotation(self):
        element = DesignElement("a.png", rotation=-90)
        assert element.to_dict()['rotation'] == 270.0
        # Stored value stays raw
        assert element.rotation == -90.0

    def test_round_trip(self):
        element = DesignElement("a.png", x=12.5, y=80, scale=1.75, rotation=30, opacity=0.4)
        restored = DesignElement.from_dict(element.to_dict())
        assert restored == element

    def test_from_dict_defaults(self):
        element = DesignElement.from_dict({'src': 'a.png'})
        assert (element.x, element.y, element.scale, element.rotation, element.opacity) == (50, 50, 1, 0, 1)


# ══════════════════════════════════════════════════════════════════════════
# DesignElements / ViewLayout
# ══════════════════════════════════════════════════════════════════════════

class TestDesignElements:

    def test_append_keeps_paint_order(self):
        a, b = DesignElement("a.png"), DesignElement("b.png")
        collection = DesignElements([a, b])
        assert [e.id for e in collection] == [a.id, b.id]
        assert collection.index_of(b.id) == 1

    def test_duplicate_id_rejected(self):
        collection = DesignElements([DesignElement("a.png", element_id="x")])
        with pytest.raises(ValueError):
            collection.append(DesignElement("b.png", element_id="x"))

    def test_non_element_rejected(self):
        with pytest.raises(TypeError):
            DesignElements().append({'src': 'a.png'})

    def test_remove_unknown_raises(self):
        with pytest.raises(KeyError):
            DesignElements().remove("missing")

    def test_snapshot_is_detached(self):
        element = DesignElement("a.png")
        collection = DesignElements([element])
        snapshot = collection.snapshot()
        element.update(x=0)
        assert snapshot[0].x == 50.0


class TestViewLayout:

    def test_views_start_empty(self):
        layout = ViewLayout()
        assert layout.element_count() == 0
        for view in ('front', 'back', 'side'):
            assert len(layout.elements(view)) == 0

    def test_views_are_independent(self):
        layout = ViewLayout()
        element = layout.add('front', DesignElement("a.png"))
        assert layout.get('front', element.id) is element
        assert layout.get('back', element.id) is None

    def test_unknown_view(self):
        with pytest.raises(ValueError):
            ViewLayout().elements('top')

    def test_round_trip(self):
        layout = ViewLayout()
        layout.add('front', DesignElement("a.png", x=10))
        layout.add('back', DesignElement("b.png", rotation=400))
        restored = ViewLayout.from_dict(layout.to_dict())
        assert restored.element_count() == 2
        assert restored.elements('front')[0].x == 10.0
        assert restored.elements('back')[0].rotation == 40.0


# ══════════════════════════════════════════════════════════════════════════
# Garment
# ══════════════════════════════════════════════════════════════════════════

class TestGarment:

    def test_missing_views_are_empty(self):
        garment = Garment('tee', 'T-Shirt', {'front': 'front.png'})
        assert garment.image_for('back') == ''
        assert garment.has_view('front')
        assert not garment.has_view('side')
        assert garment.available_views() == ['front']

    def test_unknown_view_name_rejected(self):
        with pytest.raises(ValueError):
            Garment('tee', 'T-Shirt', {'top': 'x.png'})

    def test_round_trip(self):
        garment = Garment('tee', 'T-Shirt', {'front': 'f.png', 'back': 'b.png'})
        restored = Garment.from_dict(garment.to_dict())
        assert restored.to_dict() == garment.to_dict()
