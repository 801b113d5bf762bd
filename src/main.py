import sys
import logging

from config import EngineConfig
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    argv = sys.argv if argv is None else argv
    try:
        config = EngineConfig.from_env()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=config.log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if len(argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    filepath = argv[1]
    engine = PaymentsEngine(config)
    try:
        engine.process_file(filepath)
    except OSError as e:
        logger.error(f"Cannot read input file {filepath}: {e}")
        return 1

    sys.stdout.write(engine.serialize_to_csv())
    return 0


if __name__ == "__main__":
    sys.exit(main())
