"""Demo driver for ascending and Fibonacci sequence generators."""

import logging
import sys

from .collectors import to_dataframe
from .config import DemoConfig, GeneratorConfig, get_demo_config, get_generator_config
from .errors import FrameAllocationError
from .frame_allocator import using_allocator
from .profiling import AllocatorComparator
from .sequences import ascending, fibonacci

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging level.

    Args:
        verbose: Enable verbose logging
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.INFO)


def run_ascending(demo_config: DemoConfig, generator_config: GeneratorConfig):
    """Pull the first values of an unbounded ascending sequence by hand."""
    print("\nSimple Integer Sequence Generator")

    with ascending(
        demo_config.ascending_start, on_body_failure=generator_config.failure_policy
    ) as gen:
        for i in range(1, demo_config.ascending_count + 1):
            if not gen.advance():
                break
            print(f" {i} : {gen.current_value()}")


def run_fibonacci(demo_config: DemoConfig, generator_config: GeneratorConfig):
    """Iterate a Fibonacci sequence until it passes the ceiling."""
    print("\nFibonacci Sequence Generator")

    with fibonacci(
        demo_config.fibonacci_ceiling, on_body_failure=generator_config.failure_policy
    ) as gen:
        df = to_dataframe(gen)

    print(df.to_string())
    logger.info(f"Fibonacci sequence produced {len(df)} values")


def main():
    """Main execution function."""
    try:
        demo_config = get_demo_config()
        generator_config = get_generator_config()
        setup_logging(demo_config.verbose)

        logger.info("Lazy sequence generator demo")
        logger.info(f"Frame allocator: {generator_config.allocator}")
        logger.info(f"Body failure policy: {generator_config.body_failure_policy}")

        print(
            "Example using lazy sequence generators to implement "
            "Simple Integer and Fibonacci Sequence generators"
        )

        with using_allocator(generator_config.build_allocator()) as allocator:
            run_ascending(demo_config, generator_config)
            run_fibonacci(demo_config, generator_config)
            logger.info(f"Frames still allocated: {allocator.stats.outstanding}")

        if demo_config.compare_allocators:
            AllocatorComparator().compare(
                fibonacci.body,
                demo_config.fibonacci_ceiling,
                capacity_bytes=generator_config.fixed_capacity_bytes,
            )

        return 0

    except KeyboardInterrupt:
        logger.warning("\nExecution interrupted by user")
        return 130
    except FrameAllocationError as e:
        logger.error(f"\nCould not allocate a generator frame: {e}")
        return 1
    except Exception as e:
        logger.error(f"\nError during execution: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
