"""
Tests for layout files and the headless renderer CLI.
"""
import json
import os

import pytest
from PIL import Image

from models.design_element import DesignElement
from models.garment import Garment
from models.view_layout import ViewLayout
from services.layout_io import (
    LAYOUT_FORMAT_VERSION, layout_to_dict, layout_from_dict,
    save_layout_to_file, load_layout_from_file,
)
import headless
from conftest import close_to_color


@pytest.fixture
def saved_layout(tmp_path):
    """Layout file whose garment images live on disk"""
    front = tmp_path / "front.png"
    logo = tmp_path / "logo.png"
    Image.new('RGBA', (600, 800), (255, 255, 255, 255)).save(front)
    Image.new('RGBA', (32, 32), (0, 0, 255, 255)).save(logo)

    garment = Garment('tee', 'T-Shirt', {'front': str(front)})
    layout = ViewLayout()
    layout.add('front', DesignElement(str(logo), rotation=-90))
    path = tmp_path / "tee.json"
    save_layout_to_file(garment, layout, str(path))
    return path


# ══════════════════════════════════════════════════════════════════════════
# Layout Files
# ══════════════════════════════════════════════════════════════════════════

class TestLayoutIO:

    def test_round_trip(self, saved_layout):
        garment, layout = load_layout_from_file(str(saved_layout))
        assert garment.id == 'tee'
        assert garment.has_view('front')
        assert layout.element_count() == 1

    def test_rotation_written_normalized(self, saved_layout):
        data = json.loads(saved_layout.read_text())
        assert data['version'] == LAYOUT_FORMAT_VERSION
        assert data['views']['front'][0]['rotation'] == 270.0

    def test_ids_survive(self):
        garment = Garment('tee', 'T-Shirt', {'front': 'f.png'})
        layout = ViewLayout()
        element = layout.add('back', DesignElement('a.png'))
        _, restored = layout_from_dict(layout_to_dict(garment, layout))
        assert restored.get('back', element.id) is not None

    @pytest.mark.parametrize("data", [
        {'version': 99, 'garment': {'id': 'x'}, 'views': {}},
        {'version': LAYOUT_FORMAT_VERSION},
        {'version': LAYOUT_FORMAT_VERSION, 'garment': {'id': 'x'}, 'views': {'top': []}},
        {'version': LAYOUT_FORMAT_VERSION, 'garment': {'id': 'x'}, 'views': {'front': [{'x': 1}]}},
        {'version': LAYOUT_FORMAT_VERSION, 'garment': {'id': 'x'}, 'views': []},
        {'version': LAYOUT_FORMAT_VERSION, 'garment': {'id': 'x'}, 'views': None},
        {'version': LAYOUT_FORMAT_VERSION, 'garment': {'id': 'x'}, 'views': 'front'},
        {'version': LAYOUT_FORMAT_VERSION, 'garment': {'id': 'x'}, 'views': {'front': None}},
        {'version': LAYOUT_FORMAT_VERSION, 'garment': {'id': 'x'}, 'views': {'front': ['a.png']}},
        {'version': LAYOUT_FORMAT_VERSION, 'garment': {'id': 'x'}, 'views': {'front': [{'src': 'a.png', 'rotation': float('nan')}]}},
    ])
    def test_invalid_content(self, data):
        with pytest.raises(ValueError):
            layout_from_dict(data)

    def test_non_object_file(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(ValueError):
            load_layout_from_file(str(path))


# ══════════════════════════════════════════════════════════════════════════
# Headless CLI
# ══════════════════════════════════════════════════════════════════════════

class TestHeadless:

    def test_renders_available_views(self, saved_layout, tmp_path):
        out_dir = tmp_path / "out"
        assert headless.main([str(saved_layout), '-o', str(out_dir)]) == 0
        out_file = out_dir / "tee_front.png"
        assert out_file.exists()
        img = Image.open(out_file)
        assert img.size == (600, 800)
        assert close_to_color(img.convert('RGB').getpixel((300, 400)), (0, 0, 255))

    def test_use_filenames(self, saved_layout, tmp_path):
        written = headless.render_layout_file(str(saved_layout), str(tmp_path / "out"), use_filenames=True)
        assert [os.path.basename(p) for p in written] == ["tee_front.png"]

    def test_missing_view_fails(self, saved_layout, tmp_path, capsys):
        assert headless.main([str(saved_layout), '-o', str(tmp_path), '--view', 'back']) == 1
        assert "[FAIL]" in capsys.readouterr().out

    def test_missing_file_fails(self, tmp_path):
        assert headless.main([str(tmp_path / "nope.json"), '-o', str(tmp_path)]) == 1

    def test_malformed_file_does_not_stop_batch(self, saved_layout, tmp_path, capsys):
        broken = tmp_path / "broken.json"
        broken.write_text(json.dumps({"version": LAYOUT_FORMAT_VERSION, "garment": {"id": "x"}, "views": None}))
        out_dir = tmp_path / "out"
        assert headless.main([str(broken), str(saved_layout), "-o", str(out_dir)]) == 1
        assert "[FAIL]" in capsys.readouterr().out
        assert (out_dir / "tee_front.png").exists()

    def test_data_url_output(self, saved_layout, capsys):
        assert headless.main([str(saved_layout), '--data-url']) == 0
        assert capsys.readouterr().out.strip().startswith("data:image/png;base64,")
