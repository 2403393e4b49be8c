"""
Unit tests for the ImageWriter facade using in-memory writers.
"""
import numpy as np
import pytest

from imformats.config import update_config
from imformats.writers import (FormatWriter, ImageWriter, UnknownFormatError,
                               build_suffix_catalog)


class RecordingWriter(FormatWriter):
    """Writer that records type checks and saves instead of writing files."""

    def __init__(self, name, suffixes, stacks=False):
        super().__init__(name, suffixes)
        self.stacks = stacks
        self.asked = []
        self.saved = []
        self.closed = 0

    def is_this_type(self, target_id):
        self.asked.append(target_id)
        return super().is_this_type(target_id)

    def save(self, target_id, image, last):
        self.saved.append((target_id, image, last))

    def can_do_stacks(self, target_id):
        return self.stacks

    def close(self):
        self.closed += 1


REGISTRY = {
    'PNG': lambda: RecordingWriter("Portable Network Graphics", ('.png',)),
    'TIFF': lambda: RecordingWriter("Tagged Image File Format", ('.tif', '.tiff'), stacks=True),
    'TIFF_ALIAS': lambda: RecordingWriter("Other TIFF", ('.tiff', '.tf8'), stacks=True),
}


@pytest.fixture
def image_writer():
    return ImageWriter(text="PNG\nTIFF\n", registry=REGISTRY)


@pytest.fixture
def image():
    return np.zeros((4, 4), dtype=np.uint16)


def test_suffix_catalog_example(image_writer):
    assert image_writer.get_suffixes() == ('.png', '.tif', '.tiff')
    assert image_writer.get_format() == "any image"


def test_suffix_catalog_deduplicates_and_sorts():
    writer = ImageWriter(text="TIFF_ALIAS\nPNG\nTIFF\n", registry=REGISTRY)
    assert writer.get_suffixes() == ('.png', '.tf8', '.tif', '.tiff')
    assert build_suffix_catalog(writer.get_writers()) == writer.get_suffixes()


def test_get_format_resolves_target(image_writer):
    assert image_writer.get_format("a.tif") == "Tagged Image File Format"
    assert image_writer.get_format("b.png") == "Portable Network Graphics"


def test_save_delegates_to_owning_writer(image_writer, image):
    png = image_writer.get_writer_by_key('PNG')
    tiff = image_writer.get_writer_by_key('TIFF')

    image_writer.save("a.tif", image, True)

    assert png.asked == ["a.tif"]
    assert tiff.asked == ["a.tif"]
    assert png.saved == []
    assert len(tiff.saved) == 1
    target_id, saved_image, last = tiff.saved[0]
    assert target_id == "a.tif"
    assert saved_image is image
    assert last is True


def test_save_sequence_forwards_last_flag_and_checks_once(image_writer, image):
    tiff = image_writer.get_writer_by_key('TIFF')

    image_writer.save("stack.tif", image, False)
    image_writer.save("stack.tif", image, False)
    image_writer.save("stack.tif", image, True)

    assert [last for _, _, last in tiff.saved] == [False, False, True]
    assert tiff.asked == ["stack.tif"]
    assert image_writer.dispatcher.binding.target_id == "stack.tif"


def test_get_writer_returns_bound_writer(image_writer):
    assert image_writer.get_writer("a.tiff") is image_writer.get_writer_by_key('TIFF')
    assert image_writer.dispatcher.binding.index == 1


def test_unknown_target_raises_except_can_do_stacks(image_writer, image):
    with pytest.raises(UnknownFormatError):
        image_writer.get_format("b.xyz")
    with pytest.raises(UnknownFormatError):
        image_writer.get_writer("b.xyz")
    with pytest.raises(UnknownFormatError):
        image_writer.save("b.xyz", image, True)

    assert image_writer.can_do_stacks("b.xyz") is False


def test_can_do_stacks_asks_bound_writer(image_writer):
    assert image_writer.can_do_stacks("a.tif") is True
    assert image_writer.can_do_stacks("a.png") is False


def test_can_do_stacks_returns_false_on_type_check_io_error():
    class BrokenCheck(RecordingWriter):
        def is_this_type(self, target_id):
            raise OSError("unreadable")

    writer = ImageWriter(text="BROKEN", registry={'BROKEN': lambda: BrokenCheck("B", ('.b',))})
    assert writer.can_do_stacks("x.b") is False
    with pytest.raises(OSError):
        writer.get_format("x.b")


def test_get_writer_by_key_never_checks_type(image_writer):
    png = image_writer.get_writer_by_key('png')
    tiff = image_writer.get_writer_by_key('TIFF')

    assert image_writer.get_writer_by_key('JPEG') is None
    assert image_writer.get_writer_by_key('TIFF_ALIAS') is None
    assert png.asked == []
    assert tiff.asked == []


def test_plugin_save_errors_propagate(image):
    class FailingWriter(RecordingWriter):
        def save(self, target_id, image, last):
            raise OSError("disk full")

    writer = ImageWriter(text="FAIL", registry={'FAIL': lambda: FailingWriter("F", ('.f',))})
    with pytest.raises(OSError, match="disk full"):
        writer.save("out.f", image, True)


def test_empty_registry_resolves_nothing(image):
    writer = ImageWriter(text="# no writers\n", registry=REGISTRY)

    assert writer.get_writers() == ()
    assert writer.get_suffixes() == ()
    with pytest.raises(UnknownFormatError):
        writer.get_format("a.tif")
    with pytest.raises(UnknownFormatError):
        writer.save("a.tif", image, True)
    assert writer.can_do_stacks("a.tif") is False


def test_invalid_entries_are_recorded_not_raised():
    writer = ImageWriter(text="PNG\nNOPE\nTIFF\n", registry=REGISTRY)

    assert writer.get_keys() == ('PNG', 'TIFF')
    assert [entry.identifier for entry in writer.invalid_entries] == ['NOPE']


def test_close_closes_every_writer(image_writer):
    with image_writer:
        pass
    assert all(w.closed == 1 for w in image_writer.get_writers())


def test_close_continues_after_failing_writer():
    class FailingClose(RecordingWriter):
        def close(self):
            super().close()
            raise OSError("flush failed")

    registry = {
        'A': lambda: FailingClose("A", ('.a',)),
        'B': lambda: RecordingWriter("B", ('.b',)),
        'C': lambda: FailingClose("C", ('.c',)),
    }
    writer = ImageWriter(text="A\nB\nC\n", registry=registry)

    with pytest.raises(OSError, match="flush failed"):
        writer.close()

    assert [w.closed for w in writer.get_writers()] == [1, 1, 1]


def test_is_this_type_asks_loaded_writers():
    class PickyWriter(RecordingWriter):
        def is_this_type(self, target_id):
            super().is_this_type(target_id)
            return target_id.startswith("accept")

    writer = ImageWriter(text="PICKY", registry={'PICKY': lambda: PickyWriter("P", ('.p',))})
    picky = writer.get_writer_by_key('PICKY')

    assert writer.get_suffixes() == ('.p',)
    assert writer.is_this_type("accept.p") is True
    assert writer.is_this_type("reject.p") is False
    assert picky.asked == ["accept.p", "reject.p"]
    assert writer.dispatcher.binding is None


def test_writer_list_path_from_config(tmp_path):
    path = tmp_path / "writers.txt"
    path.write_text("TIFF  # only tiff\n", encoding="utf-8")
    update_config(writer_list=str(path))

    writer = ImageWriter(registry=REGISTRY)
    assert writer.get_keys() == ('TIFF',)


def test_explicit_path_overrides_config(tmp_path):
    configured = tmp_path / "configured.txt"
    configured.write_text("TIFF\n", encoding="utf-8")
    explicit = tmp_path / "explicit.txt"
    explicit.write_text("PNG\n", encoding="utf-8")
    update_config(writer_list=str(configured))

    writer = ImageWriter(path=str(explicit), registry=REGISTRY)
    assert writer.get_keys() == ('PNG',)


def test_default_image_writer_loads_builtin_writers():
    writer = ImageWriter()

    assert writer.get_keys() == ('OME_TIFF', 'TIFF', 'PNG', 'JPEG', 'ZARR')
    assert writer.invalid_entries == ()
    assert writer.get_suffixes() == (
        '.jpeg', '.jpg', '.ome.tif', '.ome.tiff', '.png', '.tif', '.tiff', '.zarr')
    assert writer.get_format("cells.ome.tif") == "OME-TIFF"
    assert writer.get_format("cells.TIF") == "Tagged Image File Format"
    assert writer.get_format("cells.zarr") == "Zarr"
