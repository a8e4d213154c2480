"""
sim — Simulation core
=====================

Modules
-------
world
    :class:`SimulationWorld` context object and the ordered tick.
traffic_policy
    :class:`PreemptionPolicy` tunable constants.
network
    :class:`RoadLayout` junction centres, reflector placement, emergency route.
light_cycle
    :class:`LightCycle` fixed-time phase sequencer.
junction
    :class:`JunctionController` NORMAL / PREEMPTED state machine.
reflectors
    :class:`ReflectorSensor` and :class:`ReflectorChain`.
emergency
    :class:`EmergencyVehicle` and its read-only snapshot.
preemption
    :class:`PreemptionCoordinator` trigger and release decisions.
vehicle_agent
    :class:`VehicleAgent` stop / go / creep / evade behaviour.
recorder
    :class:`TickRecorder` pandas trace export.
sink
    :class:`PresentationSink` outbound notification port.
physics
    Low-level geometry helpers.
"""
