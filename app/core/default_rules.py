from typing import Any, Dict, List


# System rules seeded once at initialization.  Managers may tune ``points``
# and ``is_active`` but never rename, recategorize, or delete them.
# ``trigger_condition`` is interpreted by the telemetry pipeline only.
DEFAULT_RULES: List[Dict[str, Any]] = [
    {
        "rule_key": "speeding",
        "rule_name": "Speeding",
        "description": "Vehicle exceeded the posted speed limit",
        "category": "GPS Monitoring",
        "points": -5,
        "trigger_condition": {"type": "overspeed", "threshold_kph": 10},
    },
    {
        "rule_key": "harsh_braking",
        "rule_name": "Harsh Braking",
        "description": "Sudden deceleration detected",
        "category": "GPS Monitoring",
        "points": -3,
        "trigger_condition": {"type": "deceleration", "threshold_kph_s": -5},
    },
    {
        "rule_key": "harsh_acceleration",
        "rule_name": "Harsh Acceleration",
        "description": "Sudden acceleration detected",
        "category": "GPS Monitoring",
        "points": -2,
        "trigger_condition": {"type": "acceleration", "threshold_kph_s": 5},
    },
    {
        "rule_key": "excessive_idling",
        "rule_name": "Excessive Idling",
        "description": "Engine idling beyond the allowed duration",
        "category": "GPS Monitoring",
        "points": -1,
        "trigger_condition": {"type": "idle", "threshold_seconds": 300},
    },
    {
        "rule_key": "geofence_violation",
        "rule_name": "Geofence Violation",
        "description": "Vehicle left its assigned operating area",
        "category": "GPS Monitoring",
        "points": -10,
        "trigger_condition": {"type": "geofence_exit"},
    },
    {
        "rule_key": "phone_usage",
        "rule_name": "Phone Usage While Driving",
        "description": "Handheld phone use detected by the cabin camera",
        "category": "Driver Monitoring",
        "points": -10,
        "trigger_condition": {"type": "distraction", "source": "phone"},
    },
    {
        "rule_key": "drowsiness",
        "rule_name": "Drowsiness Detected",
        "description": "Fatigue indicators detected by the cabin camera",
        "category": "Driver Monitoring",
        "points": -8,
        "trigger_condition": {"type": "fatigue"},
    },
    {
        "rule_key": "seatbelt_unfastened",
        "rule_name": "Seatbelt Unfastened",
        "description": "Vehicle moving with the driver seatbelt unfastened",
        "category": "Driver Monitoring",
        "points": -5,
        "trigger_condition": {"type": "seatbelt", "min_speed_kph": 5},
    },
    {
        "rule_key": "collision_detected",
        "rule_name": "Collision Detected",
        "description": "Impact detected by the vehicle sensors",
        "category": "Safety & Emergency",
        "points": -25,
        "trigger_condition": {"type": "impact", "threshold_g": 2.5},
    },
    {
        "rule_key": "sos_triggered",
        "rule_name": "SOS Triggered",
        "description": "Driver pressed the emergency button",
        "category": "Safety & Emergency",
        "points": 0,
        "trigger_condition": {"type": "sos"},
    },
    {
        "rule_key": "hours_of_service_violation",
        "rule_name": "Hours of Service Violation",
        "description": "Driving time exceeded the regulated limit",
        "category": "Compliance",
        "points": -15,
        "trigger_condition": {"type": "hours_of_service", "max_hours": 11},
    },
    {
        "rule_key": "missed_inspection",
        "rule_name": "Missed Vehicle Inspection",
        "description": "Pre-trip inspection was not completed",
        "category": "Compliance",
        "points": -5,
        "trigger_condition": {"type": "inspection_missing"},
    },
    {
        "rule_key": "safe_trip",
        "rule_name": "Safe Trip Completed",
        "description": "Trip completed without any violations",
        "category": "Achievement",
        "points": 2,
        "trigger_condition": {"type": "trip_clean"},
    },
    {
        "rule_key": "safe_week",
        "rule_name": "Safe Driving Week",
        "description": "Seven consecutive days without violations",
        "category": "Achievement",
        "points": 10,
        "trigger_condition": {"type": "streak", "days": 7},
    },
]
