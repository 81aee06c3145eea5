"""End-to-end tests rendering complete templates."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

import pytest

import quill

PLANETS_TEMPLATE = (
    "@[$planet:$planets] {"
    "$planet.Name: ?[$planet.Moons] {#$planet.Moons moon?[#$planet.Moons!=1]{s}} "
    "{no moons}\n"
    "}"
)

PLANETS_OUTPUT = "Mercury: no moons\nVenus: no moons\nEarth: 1 moon\nMars: 2 moons\n"


@dataclass
class Planet:
    Name: str
    Moons: list[str] = field(default_factory=list)


pytestmark = pytest.mark.integration


class TestPlanetsTemplate:
    """The planets report exercises loops, counts and nested conditionals."""

    def test_render_from_mappings(self, planets: list[dict[str, Any]]) -> None:
        tree = quill.parse(PLANETS_TEMPLATE)
        assert tree.render({"planets": planets}) == PLANETS_OUTPUT

    def test_render_from_objects(self, planets: list[dict[str, Any]]) -> None:
        objects = [Planet(p["Name"], p["Moons"]) for p in planets]
        tree = quill.parse(PLANETS_TEMPLATE)
        assert tree.render({"planets": objects}) == PLANETS_OUTPUT

    def test_tree_is_reusable(self, planets: list[dict[str, Any]]) -> None:
        tree = quill.parse(PLANETS_TEMPLATE)
        assert tree.render({"planets": planets[:1]}) == "Mercury: no moons\n"
        assert tree.render({"planets": planets}) == PLANETS_OUTPUT
        assert tree.render({}) == ""


class TestDocumentTemplate:
    def test_multiline_report(self) -> None:
        template = (
            "Dear $[user.name],\n"
            "?[#$orders == 0]{You have no orders.}"
            "{Your orders:\n@[$o:$orders]{- $o.item x$o.qty?[$o.qty >= 10]{ (bulk)}\n}}"
            "\n?[$user.vip && !$user.suspended]{Thanks for being a VIP\\!}"
        )
        variables = {
            "user": {"name": "Ada", "vip": True, "suspended": False},
            "orders": [{"item": "ink", "qty": 2}, {"item": "paper", "qty": 500}],
        }

        assert quill.parse(template).render(variables) == (
            "Dear Ada,\n"
            "Your orders:\n- ink x2\n- paper x500 (bulk)\n"
            "\nThanks for being a VIP!"
        )

    def test_escaped_user_content(self) -> None:
        content = 'Cost: $5 @[#] "quoted" } \\'
        template = "Note: " + quill.escape(content)

        assert quill.parse(template).render({}) == "Note: " + content


class TestConcurrentRendering:
    """One tree rendered from many threads with distinct variables."""

    def test_threads_do_not_share_bindings(self) -> None:
        tree = quill.parse("@[$i:$items]{$who-$i,}")

        def job(n: int) -> tuple[str, str]:
            variables = {"who": f"t{n}", "items": list(range(50))}
            expected = "".join(f"t{n}-{i}," for i in range(50))
            return tree.render(variables), expected

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(job, range(200)))

        for rendered, expected in results:
            assert rendered == expected

    def test_loop_identifier_does_not_leak_between_renders(self) -> None:
        tree = quill.parse("@[$i:$items]{$i}[$i]")

        with ThreadPoolExecutor(max_workers=4) as pool:
            outputs = list(
                pool.map(
                    lambda n: tree.render({"items": [n] * 3, "i": "outer"}),
                    range(100),
                )
            )

        assert outputs == [f"{n}{n}{n}[outer]" for n in range(100)]
