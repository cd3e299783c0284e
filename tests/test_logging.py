import logging

from markerlift.logging_ import PACKAGE_LOGGER, get_logger, set_level


def test_loggers_live_under_package_namespace():
    assert get_logger("markerlift.lift.mapper").name == "markerlift.lift.mapper"
    assert get_logger("__main__").name == "markerlift.__main__"
    assert get_logger().name == PACKAGE_LOGGER


def test_set_level_leaves_root_level_alone():
    package = logging.getLogger(PACKAGE_LOGGER)
    root_level = logging.getLogger().level
    previous = package.level
    try:
        set_level(logging.DEBUG)

        assert package.level == logging.DEBUG
        assert get_logger("markerlift.io_.chain").isEnabledFor(logging.DEBUG)
        assert logging.getLogger().level == root_level
    finally:
        package.setLevel(previous)
