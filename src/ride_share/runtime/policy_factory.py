from ride_share.app.protocols import Clock, MatchingPolicy
from ride_share.config.models import (
    ClockUnion,
    MatchingPolicyLongestIdleModel,
    MatchingPolicyUnion,
    SimClockModel,
    WallClockModel,
)
from ride_share.policy.matching import LongestIdleMatchingPolicy
from ride_share.sim.clock import SimClock, WallClock


def make_matching_policy(cfg: MatchingPolicyUnion) -> MatchingPolicy:
    if isinstance(cfg, MatchingPolicyLongestIdleModel):
        return LongestIdleMatchingPolicy()
    else:
        raise TypeError(cfg)


def make_clock(cfg: ClockUnion) -> Clock:
    if isinstance(cfg, WallClockModel):
        return WallClock()
    elif isinstance(cfg, SimClockModel):
        return SimClock.utc_epoch(*cfg.epoch)
    else:
        raise TypeError(cfg)
