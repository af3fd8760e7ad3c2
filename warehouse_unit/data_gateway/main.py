import argparse
import logging

from .core.engine import DataEngine
from .core.interfaces import ISink
from .adapters.sink_file import RapidScadaFileSink
from .adapters.sink_mqtt import MQTTSink
from .adapters.source_rest import RestSourceAdapter

logger = logging.getLogger("DataGateway")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Warehouse Twin Data Gateway")
    parser.add_argument("--sink", choices=["mqtt", "file"], default="mqtt", help="Select data sink (mqtt or file)")
    parser.add_argument("--url", default="http://localhost:8000/api/state", help="Warehouse state endpoint")
    parser.add_argument("--interval", type=float, default=1.0, help="Polling interval in seconds")
    parser.add_argument("--broker", default="localhost")
    parser.add_argument("--port", type=int, default=1883)
    parser.add_argument("--topic", default="warehouse-twin/state")
    parser.add_argument("--file", default="gateway_output.txt", help="Output path for the file sink")
    return parser


def build_sink(args) -> ISink:
    if args.sink == "mqtt":
        return MQTTSink(args.broker, args.port, args.topic)
    return RapidScadaFileSink(args.file)


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format='[GW] %(asctime)s | %(name)s | %(message)s',
                        datefmt='%H:%M:%S')
    args = build_parser().parse_args(argv)

    logger.info(f">>> Initializing Data Gateway using {args.sink.upper()} Sink...")
    source = RestSourceAdapter(args.url)
    sink = build_sink(args)

    # File sink uses numbered channels, in sorted tag order
    mapping = None
    if args.sink == "file":
        tags = sorted(source.read().keys())
        mapping = {tag: 100 + i for i, tag in enumerate(tags)} or None

    engine = DataEngine(source, sink, mapping)

    source.connect()
    sink.connect()
    try:
        engine.run(interval=args.interval)
    finally:
        sink.disconnect()
        source.disconnect()


if __name__ == "__main__":
    main()
