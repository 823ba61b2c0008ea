import logging
import pytest
from projgeom import pn
from projgeom.log import get_logger, set_level
## unit tests for projgeom log.py


class TestLog:
    """loggers live under the projgeom hierarchy"""

    def test_names(self):
        assert get_logger("foo").name == "projgeom.foo"
        assert get_logger("projgeom.rn").name == "projgeom.rn"
        assert get_logger("projgeom").name == "projgeom"

    def test_root_has_handler(self):
        get_logger("bar")
        assert logging.getLogger("projgeom").handlers

    def test_warning_is_emitted(self, caplog):
        with caplog.at_level(logging.WARNING, logger="projgeom"):
            v = pn.set_to_length([0.0, 0.0, 0.0, 0.0], 1.0, pn.EUCLIDEAN)
        assert v == [0.0, 0.0, 0.0, 0.0]
        assert any("null vector" in r.getMessage() for r in caplog.records)
        assert all(r.name.startswith("projgeom") for r in caplog.records)

    def test_set_level(self):
        root = logging.getLogger("projgeom")
        old = root.level
        try:
            set_level("debug")
            assert root.level == logging.DEBUG
            set_level(logging.ERROR)
            assert root.level == logging.ERROR
        finally:
            root.setLevel(old)

    def test_set_bad_level(self):
        with pytest.raises(ValueError):
            set_level("nonsense")
