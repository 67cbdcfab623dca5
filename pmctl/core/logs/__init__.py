"""Local log reading for supervised processes."""

from pmctl.core.logs.log_follower import LogFollower

__all__ = ["LogFollower"]
