"""Publishing and consuming game messages over AMQP."""

from __future__ import annotations

import dataclasses
import json
import logging
from enum import Enum, IntEnum
from typing import Any, Callable, Optional, Union

import msgpack
import pika

logger = logging.getLogger(__name__)

DEAD_LETTER_EXCHANGE = "peril_dlx"
DEAD_LETTER_QUEUE = "peril_dlq"
JSON_CONTENT_TYPE = "application/json"
BINARY_CONTENT_TYPE = "application/msgpack"
PERSISTENT_DELIVERY = 2
BINARY_PREFETCH_COUNT = 10


class SimpleQueueType(IntEnum):
    """How long a queue lives."""

    DURABLE = 0
    TRANSIENT = 1


class AckType(str, Enum):
    """What to do with a delivery once its handler has run."""

    ACK = "Ack"
    NACK_REQUEUE = "NackRequeue"
    NACK_DISCARD = "NackDiscard"


Handler = Callable[[Any], Union[AckType, str]]
Decoder = Optional[Callable[[Any], Any]]


def _to_plain(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


def encode_json(value: Any) -> bytes:
    """Serialise a message as compact JSON."""
    return json.dumps(_to_plain(value), separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def encode_binary(value: Any) -> bytes:
    """Serialise a message in the compact binary format."""
    return msgpack.packb(_to_plain(value), use_bin_type=True)


def decode_binary(body: bytes) -> Any:
    """Decode a binary message body, raising ValueError when it is malformed."""
    try:
        return msgpack.unpackb(body, raw=False)
    except (msgpack.UnpackException, ValueError, TypeError) as err:
        raise ValueError(f"could not decode binary message: {err}") from err


def queue_arguments(queue_name: str, queue_type: SimpleQueueType) -> dict[str, Any]:
    """Keyword arguments for declaring a queue of the given kind."""
    transient = SimpleQueueType(queue_type) is SimpleQueueType.TRANSIENT
    arguments = None
    if queue_name != DEAD_LETTER_QUEUE:
        arguments = {"x-dead-letter-exchange": DEAD_LETTER_EXCHANGE}
    return {
        "durable": not transient,
        "auto_delete": transient,
        "exclusive": transient,
        "arguments": arguments,
    }


def _publish(channel: Any, exchange: str, key: str, body: bytes, content_type: str) -> None:
    channel.basic_publish(
        exchange=exchange,
        routing_key=key,
        body=body,
        properties=pika.BasicProperties(
            content_type=content_type, delivery_mode=PERSISTENT_DELIVERY
        ),
        mandatory=False,
    )


def publish_json(channel: Any, exchange: str, key: str, value: Any) -> None:
    """Publish a persistent JSON message."""
    try:
        body = encode_json(value)
    except (TypeError, ValueError):
        logger.exception("Error marshalling JSON")
        raise
    _publish(channel, exchange, key, body, JSON_CONTENT_TYPE)


def publish_binary(channel: Any, exchange: str, key: str, value: Any) -> None:
    """Publish a persistent binary message."""
    _publish(channel, exchange, key, encode_binary(value), BINARY_CONTENT_TYPE)


def declare_and_bind(
    connection: Any,
    exchange: str,
    queue_name: str,
    key: str,
    queue_type: SimpleQueueType,
) -> tuple[Any, str]:
    """Open a channel, declare a queue and bind it; returns (channel, queue name)."""
    try:
        channel = connection.channel()
    except Exception:
        logger.exception("Error starting pubsub channel")
        raise
    try:
        result = channel.queue_declare(queue=queue_name, **queue_arguments(queue_name, queue_type))
    except Exception:
        logger.exception("Error declaring pubsub queue")
        raise
    try:
        channel.queue_bind(queue=queue_name, exchange=exchange, routing_key=key)
    except Exception:
        logger.exception("Error binding pubsub queue")
        raise
    return channel, result.method.queue


def acknowledge(channel: Any, delivery_tag: int, ack_type: Union[AckType, str]) -> AckType:
    """Settle a delivery; unknown ack types discard it. Returns the action taken."""
    try:
        action = AckType(ack_type)
    except ValueError:
        action = None
    if action is AckType.ACK:
        channel.basic_ack(delivery_tag=delivery_tag, multiple=False)
        return AckType.ACK
    if action is AckType.NACK_REQUEUE:
        channel.basic_nack(delivery_tag=delivery_tag, multiple=False, requeue=True)
        return AckType.NACK_REQUEUE
    channel.basic_nack(delivery_tag=delivery_tag, multiple=False, requeue=False)
    return AckType.NACK_DISCARD


def _settle(channel: Any, method: Any, ack_type: Union[AckType, str], data: Any) -> None:
    try:
        label = AckType(ack_type).value
    except ValueError:
        label = "Default"
    logger.info("%s for key: %s Message Body: %s", label, method.routing_key, data)
    acknowledge(channel, method.delivery_tag, ack_type)


def subscribe_json(
    connection: Any,
    exchange: str,
    queue_name: str,
    key: str,
    queue_type: SimpleQueueType,
    handler: Handler,
    decode: Decoder = None,
) -> Any:
    """Consume JSON messages into ``handler``; returns the consuming channel.

    Deliveries are handled while the connection processes events.
    """
    channel, _ = declare_and_bind(connection, exchange, queue_name, key, queue_type)

    def on_message(ch: Any, method: Any, properties: Any, body: bytes) -> None:
        try:
            data = json.loads(body)
            if decode is not None:
                data = decode(data)
        except (ValueError, KeyError, TypeError) as err:
            logger.error("Error decoding JSON for key %s: %s", method.routing_key, err)
            ch.basic_nack(delivery_tag=method.delivery_tag, multiple=False, requeue=False)
            return
        _settle(ch, method, handler(data), data)

    channel.basic_consume(queue=queue_name, on_message_callback=on_message, auto_ack=False)
    return channel


def subscribe_binary(
    connection: Any,
    exchange: str,
    queue_name: str,
    key: str,
    queue_type: SimpleQueueType,
    handler: Handler,
    decode: Decoder = None,
) -> Any:
    """Consume binary messages into ``handler``; returns the consuming channel.

    A message that cannot be decoded stops the consumer.
    """
    channel, _ = declare_and_bind(connection, exchange, queue_name, key, queue_type)
    try:
        channel.basic_qos(prefetch_count=BINARY_PREFETCH_COUNT, global_qos=True)
    except Exception as err:
        logger.error("Error setting channel QoS: %s", err)

    def on_message(ch: Any, method: Any, properties: Any, body: bytes) -> None:
        try:
            data = decode_binary(body)
            if decode is not None:
                data = decode(data)
        except (ValueError, KeyError, TypeError) as err:
            logger.error("Error decoding binary message: %s", err)
            ch.basic_cancel(method.consumer_tag)
            return
        _settle(ch, method, handler(data), data)

    channel.basic_consume(queue=queue_name, on_message_callback=on_message, auto_ack=False)
    return channel