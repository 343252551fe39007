"""
Soft Barrier Fan-In Example

This example demonstrates:
1. Plain async functions registered as nodes
2. A router fanning out to two branches in the same wavefront
3. ``wait_for_siblings`` letting the join target run exactly once
"""

import asyncio

from leadrecon.core.graph import END, START, Graph, NodeState, route_by, wait_for_siblings


async def plan(state: NodeState):
    return {"artifacts": {"plan": {"mode": state.packet}}}


async def draft_a(state: NodeState):
    await asyncio.sleep(0.2)
    return {"artifacts": {"drafts": {"a": "slow draft"}}}


async def draft_b(state: NodeState):
    return {"artifacts": {"drafts": {"b": "fast draft"}}}


async def publish(state: NodeState):
    drafts = state.get_artifact("drafts", {})
    print(f"Publishing {sorted(drafts)}")
    return {"approvals": ["published"]}


def build():
    def both(state: NodeState) -> bool:
        return state.packet == "both"

    graph = Graph()
    graph.add_node("plan", plan)
    graph.add_node("draft_a", draft_a)
    graph.add_node("draft_b", draft_b)
    graph.add_node("publish", publish)

    graph.add_edge(START, "plan")
    graph.add_conditional_edges(
        "plan",
        route_by(lambda state: state.packet, {"both": ["draft_a", "draft_b"], "a": ["draft_a"], "b": ["draft_b"]}),
        destinations=["draft_a", "draft_b"],
    )
    graph.add_conditional_edges("draft_a", wait_for_siblings("publish", ["drafts.b"], both), destinations=["publish"])
    graph.add_conditional_edges("draft_b", wait_for_siblings("publish", ["drafts.a"], both), destinations=["publish"])
    graph.add_edge("publish", END)
    return graph.compile()


async def main():
    graph = build()
    for mode in ("both", "a", "b"):
        run = await graph.run(mode)
        print(f"{mode}: wavefronts={run.wavefronts} publish ran {run.executed('publish')}x")


if __name__ == "__main__":
    asyncio.run(main())
