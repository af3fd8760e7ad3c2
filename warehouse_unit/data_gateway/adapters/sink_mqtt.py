import json
import logging
from typing import Dict, Any

import paho.mqtt.client as mqtt

from ..core.interfaces import ISink, IAdapter

logger = logging.getLogger("MqttSink")


class MQTTSink(ISink, IAdapter):
    """
    Publishes each snapshot as one flat JSON payload on a single topic.
    """
    def __init__(self, broker: str, port: int, topic: str, client=None):
        self.broker = broker
        self.port = port
        self.topic = topic
        self.client = client or mqtt.Client(mqtt.CallbackAPIVersion.VERSION2)

    def connect(self):
        try:
            logger.info(f"Connecting to MQTT Broker {self.broker}:{self.port}...")
            self.client.connect(self.broker, self.port, 60)
            self.client.loop_start()
            logger.info("MQTT Connected")
        except OSError as e:
            logger.error(f"MQTT Connection Failed: {e}")

    def disconnect(self):
        self.client.loop_stop()
        self.client.disconnect()

    def write(self, data: Dict[Any, Any]) -> None:
        if not data:
            return

        payload = json.dumps(data)
        logger.debug(f"Publishing to MQTT topic {self.topic}: {payload}")
        info = self.client.publish(self.topic, payload, qos=0, retain=False)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            logger.error(f"MQTT Publish Failed (rc={info.rc})")
