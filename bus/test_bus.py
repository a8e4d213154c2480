#!/usr/bin/env python3
"""
Tests for the event bus, its metrics and the BusSink adapter.
"""

import unittest

from bus import TOPIC_LIGHTS, TOPIC_PULSE, TOPIC_STATUS, BusSink, EventBus
from sim.junction import Approach, LightColor
from sim.world import SimulationWorld


class EventBusTests(unittest.TestCase):
    def setUp(self):
        self.bus = EventBus(max_queue=3)

    def test_poll_returns_and_clears(self):
        self.bus.publish("t", "J0", {"n": 1})
        self.bus.publish("t", "J0", {"n": 2})
        msgs = self.bus.poll("t")
        self.assertEqual([m.payload["n"] for m in msgs], [1, 2])
        self.assertEqual(self.bus.poll("t"), [])
        self.assertEqual(self.bus.poll("never"), [])

    def test_queue_is_bounded(self):
        with self.assertLogs("bus.event_bus", level="WARNING"):
            for n in range(5):
                self.bus.publish("t", "J0", {"n": n})
        self.assertEqual(self.bus.pending("t"), 3)
        self.assertEqual([m.payload["n"] for m in self.bus.poll("t")], [2, 3, 4])
        self.assertEqual(self.bus.metrics.discarded, 2)

    def test_metrics(self):
        self.bus.publish("a", "J0", {})
        self.bus.publish("b", "EV", {})
        self.bus.publish("b", "EV", {})
        self.bus.poll("b")
        report = self.bus.metrics.report()
        self.assertEqual(report["published"], 3)
        self.assertEqual(report["polled"], 2)
        self.assertEqual(report["by_topic"], {"a": 1, "b": 2})
        self.assertEqual(self.bus.topics(), ["a", "b"])

    def test_clock_stamps_messages(self):
        bus = EventBus(clock=lambda: 12.5)
        bus.publish("t", "EV", {})
        self.assertEqual(bus.poll("t")[0].ts, 12.5)

    def test_invalid_queue_size(self):
        with self.assertRaises(ValueError):
            EventBus(max_queue=0)


class BusSinkTests(unittest.TestCase):
    def setUp(self):
        self.bus = EventBus()
        self.sink = BusSink(self.bus)

    def test_light_colors_payload(self):
        self.sink.apply_light_colors(2, {Approach.EAST: LightColor.GREEN, Approach.NORTH: LightColor.RED})
        msg = self.bus.poll(TOPIC_LIGHTS)[0]
        self.assertEqual(msg.sender, "J2")
        self.assertEqual(msg.payload, {"junction": 2, "colors": {"EAST": "GREEN", "NORTH": "RED"}})

    def test_pulse_and_status(self):
        self.sink.reflector_pulse("J0_R03", 1500)
        self.sink.status_text(1, "J1: Passed")
        self.sink.status_text("EV", "Approaching")
        self.assertEqual(self.bus.poll(TOPIC_PULSE)[0].payload, {"sensor": "J0_R03", "duration_ms": 1500})
        senders = [m.sender for m in self.bus.poll(TOPIC_STATUS)]
        self.assertEqual(senders, ["J1", "EV"])

    def test_world_publishes_through_sink(self):
        world = SimulationWorld(sink=self.sink, seed=1, auto_activate=False)
        self.assertEqual(len(self.bus.poll(TOPIC_LIGHTS)), len(world.junctions))
        world.activate_emergency()
        world.tick(0.05)
        status = [m.payload["message"] for m in self.bus.poll(TOPIC_STATUS)]
        self.assertEqual(status[0], "Approaching")
        self.assertIn("J0: Preempting (Zone & Reflectors Active)", status)
        self.assertGreater(self.bus.pending(TOPIC_PULSE), 0)


if __name__ == "__main__":
    unittest.main()
