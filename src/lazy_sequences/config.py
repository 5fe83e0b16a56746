"""Configuration management for the application."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .frame_allocator import FixedCapacityFrameAllocator, PooledFrameAllocator
from .frame_allocator_interface import FrameAllocator
from .models import AllocatorKind, BodyFailurePolicy

# Load environment variables from .env file
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass
class GeneratorConfig:
    """Frame allocation and failure-handling parameters."""

    allocator: str = AllocatorKind.POOLED.value
    fixed_capacity_bytes: int = 4096
    pool_size_class_bytes: int = 64
    pool_max_blocks: int = 32
    body_failure_policy: str = BodyFailurePolicy.RAISE.value

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Load generator configuration from environment variables.

        - LAZY_SEQ_ALLOCATOR selects ``pooled`` (default) or ``fixed``
        - LAZY_SEQ_BODY_FAILURE selects ``raise`` (default) or ``terminate``
        """
        return cls(
            allocator=os.getenv("LAZY_SEQ_ALLOCATOR", AllocatorKind.POOLED.value).lower(),
            fixed_capacity_bytes=int(os.getenv("LAZY_SEQ_FIXED_CAPACITY_BYTES", "4096")),
            pool_size_class_bytes=int(os.getenv("LAZY_SEQ_POOL_SIZE_CLASS_BYTES", "64")),
            pool_max_blocks=int(os.getenv("LAZY_SEQ_POOL_MAX_BLOCKS", "32")),
            body_failure_policy=os.getenv(
                "LAZY_SEQ_BODY_FAILURE", BodyFailurePolicy.RAISE.value
            ).lower(),
        )

    def __post_init__(self):
        """Validate configuration after initialization."""
        valid_allocators = [kind.value for kind in AllocatorKind]
        if self.allocator not in valid_allocators:
            raise ValueError(
                f"Unknown allocator: {self.allocator}. Valid options: {', '.join(valid_allocators)}"
            )
        valid_policies = [policy.value for policy in BodyFailurePolicy]
        if self.body_failure_policy not in valid_policies:
            raise ValueError(
                f"Unknown body failure policy: {self.body_failure_policy}. "
                f"Valid options: {', '.join(valid_policies)}"
            )
        if self.fixed_capacity_bytes < 0:
            raise ValueError("fixed_capacity_bytes must not be negative")
        if self.pool_size_class_bytes <= 0:
            raise ValueError("pool_size_class_bytes must be positive")
        if self.pool_max_blocks < 0:
            raise ValueError("pool_max_blocks must not be negative")

    @property
    def failure_policy(self) -> BodyFailurePolicy:
        return BodyFailurePolicy(self.body_failure_policy)

    def build_allocator(self) -> FrameAllocator:
        """Create the allocator described by this configuration."""
        if self.allocator == AllocatorKind.FIXED.value:
            return FixedCapacityFrameAllocator(capacity=self.fixed_capacity_bytes)
        return PooledFrameAllocator(
            size_class_bytes=self.pool_size_class_bytes,
            max_blocks_per_class=self.pool_max_blocks,
        )


@dataclass
class DemoConfig:
    """Demo driver parameters."""

    ascending_start: int = 0
    ascending_count: int = 10
    fibonacci_ceiling: float = 10e44
    compare_allocators: bool = False
    verbose: bool = False

    @classmethod
    def from_env(cls) -> "DemoConfig":
        """Load demo configuration from environment variables."""
        return cls(
            ascending_start=int(os.getenv("LAZY_SEQ_ASCENDING_START", "0")),
            ascending_count=int(os.getenv("LAZY_SEQ_ASCENDING_COUNT", "10")),
            fibonacci_ceiling=float(os.getenv("LAZY_SEQ_FIBONACCI_CEILING", "10E44")),
            compare_allocators=_env_bool("LAZY_SEQ_COMPARE_ALLOCATORS", "false"),
            verbose=_env_bool("LAZY_SEQ_VERBOSE", "false"),
        )

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.ascending_count < 0:
            raise ValueError("ascending_count must not be negative")
        if self.fibonacci_ceiling < 0:
            raise ValueError("fibonacci_ceiling must not be negative")


def get_generator_config() -> GeneratorConfig:
    """Get generator configuration."""
    return GeneratorConfig.from_env()


def get_demo_config() -> DemoConfig:
    """Get demo configuration."""
    return DemoConfig.from_env()
