import pytest

from paging_sim import MemoryConfig, generate


@pytest.fixture
def small_config():
    """16 KB virtual, 8 KB physical, 4 KB pages: 4 pages and 2 frames"""
    return MemoryConfig.from_kilobytes(16, 4)


@pytest.fixture
def small_table(small_config):
    return generate(small_config)


@pytest.fixture
def eight_page_config():
    """32 KB virtual, 16 KB physical, 4 KB pages: 8 pages and 4 frames"""
    return MemoryConfig.from_kilobytes(32, 4)


@pytest.fixture
def eight_page_table(eight_page_config):
    return generate(eight_page_config)
