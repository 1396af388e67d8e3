"""Game rules, messages and AMQP messaging helpers for the Peril strategy game."""

__version__ = "0.1.0"

__all__ = ["gamedata", "gamelogic", "gamestate", "logs", "pubsub", "routing"]