#Marks routing as a package.
#Re-exports the road geometry, the network and the routing policy so other
#modules import from routing without knowing internal file names.
#No business logic.

#Planners depend on traffic signals; import them from routing.planner directly
#so that traffic can import routing.models without a cycle.
from .models import EPSILON, Point, RoadSegment
from .network import DEFAULT_ROADS, RoadNetwork, default_network
from .policy import RoutingPolicy, default_routing_policy, routing_policy_from_env

__all__ = [
    "EPSILON",
    "Point",
    "RoadSegment",
    "DEFAULT_ROADS",
    "RoadNetwork",
    "default_network",
    "RoutingPolicy",
    "default_routing_policy",
    "routing_policy_from_env",
]
