"""Tests for config module."""

import pytest

from lazy_sequences.config import DemoConfig, GeneratorConfig, get_demo_config, get_generator_config
from lazy_sequences.frame_allocator import FixedCapacityFrameAllocator, PooledFrameAllocator
from lazy_sequences.models import BodyFailurePolicy

ENV_VARS = [
    "LAZY_SEQ_ALLOCATOR",
    "LAZY_SEQ_FIXED_CAPACITY_BYTES",
    "LAZY_SEQ_POOL_SIZE_CLASS_BYTES",
    "LAZY_SEQ_POOL_MAX_BLOCKS",
    "LAZY_SEQ_BODY_FAILURE",
    "LAZY_SEQ_ASCENDING_START",
    "LAZY_SEQ_ASCENDING_COUNT",
    "LAZY_SEQ_FIBONACCI_CEILING",
    "LAZY_SEQ_COMPARE_ALLOCATORS",
    "LAZY_SEQ_VERBOSE",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_generator_config_defaults(clean_env):
    """Test default generator configuration."""
    config = get_generator_config()

    assert config.allocator == "pooled"
    assert config.fixed_capacity_bytes == 4096
    assert config.failure_policy is BodyFailurePolicy.RAISE
    assert isinstance(config.build_allocator(), PooledFrameAllocator)


def test_generator_config_from_env(clean_env):
    """Test loading generator configuration from environment variables."""
    clean_env.setenv("LAZY_SEQ_ALLOCATOR", "FIXED")
    clean_env.setenv("LAZY_SEQ_FIXED_CAPACITY_BYTES", "512")
    clean_env.setenv("LAZY_SEQ_BODY_FAILURE", "terminate")

    config = GeneratorConfig.from_env()
    allocator = config.build_allocator()

    assert config.allocator == "fixed"
    assert config.failure_policy is BodyFailurePolicy.TERMINATE
    assert isinstance(allocator, FixedCapacityFrameAllocator)
    assert allocator.capacity == 512


def test_pool_settings_reach_allocator(clean_env):
    """Test that pool parameters are applied."""
    clean_env.setenv("LAZY_SEQ_POOL_SIZE_CLASS_BYTES", "128")
    clean_env.setenv("LAZY_SEQ_POOL_MAX_BLOCKS", "4")

    allocator = get_generator_config().build_allocator()

    assert allocator.size_class_bytes == 128
    assert allocator.max_blocks_per_class == 4


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"allocator": "arena"}, "Unknown allocator"),
        ({"body_failure_policy": "ignore"}, "Unknown body failure policy"),
        ({"fixed_capacity_bytes": -1}, "fixed_capacity_bytes"),
        ({"pool_size_class_bytes": 0}, "pool_size_class_bytes"),
        ({"pool_max_blocks": -1}, "pool_max_blocks"),
    ],
)
def test_generator_config_validation(kwargs, message):
    """Test that invalid generator configuration is rejected."""
    with pytest.raises(ValueError, match=message):
        GeneratorConfig(**kwargs)


def test_demo_config_defaults(clean_env):
    """Test default demo configuration."""
    config = get_demo_config()

    assert config.ascending_start == 0
    assert config.ascending_count == 10
    assert config.fibonacci_ceiling == 10e44
    assert config.compare_allocators is False
    assert config.verbose is False


def test_demo_config_from_env(clean_env):
    """Test loading demo configuration from environment variables."""
    clean_env.setenv("LAZY_SEQ_ASCENDING_START", "3")
    clean_env.setenv("LAZY_SEQ_ASCENDING_COUNT", "5")
    clean_env.setenv("LAZY_SEQ_FIBONACCI_CEILING", "100")
    clean_env.setenv("LAZY_SEQ_COMPARE_ALLOCATORS", "true")
    clean_env.setenv("LAZY_SEQ_VERBOSE", "1")

    config = DemoConfig.from_env()

    assert config.ascending_start == 3
    assert config.ascending_count == 5
    assert config.fibonacci_ceiling == 100.0
    assert config.compare_allocators is True
    assert config.verbose is True


def test_demo_config_validation():
    """Test that invalid demo configuration is rejected."""
    with pytest.raises(ValueError, match="ascending_count"):
        DemoConfig(ascending_count=-1)
    with pytest.raises(ValueError, match="fibonacci_ceiling"):
        DemoConfig(fibonacci_ceiling=-5)
