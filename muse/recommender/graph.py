from langgraph.graph import StateGraph, END

from muse.recommender.node.candidates import fetch_candidates, route_candidates, weigh_candidates
from muse.recommender.node.history import fetch_exclusions, record_pick
from muse.recommender.node.selection import first_pick_bias, sample
from muse.recommender.state import PickState

graph = StateGraph(PickState)

graph.add_node("fetch_exclusions", fetch_exclusions)
graph.add_node("fetch_candidates", fetch_candidates)
graph.add_node("weigh_candidates", weigh_candidates)
graph.add_node("first_pick_bias", first_pick_bias)
graph.add_node("sample_candidate", sample)
graph.add_node("record_pick", record_pick)

# exclusions must be known before candidates are fetched
graph.set_entry_point("fetch_exclusions")
graph.add_edge("fetch_exclusions", "fetch_candidates")
graph.add_conditional_edges(
    "fetch_candidates",
    route_candidates,
    {
        "empty": END,
        "weigh": "weigh_candidates",
    }
)
graph.add_edge("weigh_candidates", "first_pick_bias")
graph.add_edge("first_pick_bias", "sample_candidate")
graph.add_edge("sample_candidate", "record_pick")
graph.add_edge("record_pick", END)

pick_graph = graph.compile()
