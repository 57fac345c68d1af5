"""
Reference descriptions for well-known OBD-II and VAG fault codes.
Used only to fill in a description when a report lists a bare code. Per-code category and
severity for safety-critical codes live in classification.rules.SAFETY_CRITICAL_CODES.
"""
from __future__ import annotations

KNOWN_CODE_DESCRIPTIONS: dict[str, str] = {
    # OBD-II powertrain
    "P0122": "Throttle/Pedal Position Sensor/Switch A Circuit Low Input",
    "P0123": "Throttle/Pedal Position Sensor/Switch A Circuit High Input",
    "P0128": "Coolant Thermostat Temperature Below Regulating Temperature",
    "P0171": "System Too Lean (Bank 1)",
    "P0172": "System Too Rich (Bank 1)",
    "P0222": "Throttle/Pedal Position Sensor/Switch B Circuit Low Input",
    "P0223": "Throttle/Pedal Position Sensor/Switch B Circuit High Input",
    "P0300": "Random/Multiple Cylinder Misfire Detected",
    "P0420": "Catalyst System Efficiency Below Threshold (Bank 1)",
    "P0430": "Catalyst System Efficiency Below Threshold (Bank 2)",
    "P0506": "Idle Control System RPM Lower Than Expected",
    "P0507": "Idle Control System RPM Higher Than Expected",
    "P0562": "System Voltage Low",
    "P0563": "System Voltage High",
    "P0700": "Transmission Control System Malfunction",
    "P0741": "Torque Converter Clutch Circuit Performance or Stuck Off",
    "P0742": "Torque Converter Clutch Circuit Stuck On",
    "P0753": "Shift Solenoid A Electrical",
    "P0758": "Shift Solenoid B Electrical",
    "P0841": "Transmission Fluid Pressure Sensor/Switch A Circuit Range/Performance",
    "P0842": "Transmission Fluid Pressure Sensor/Switch A Circuit Low",
    "P0843": "Transmission Fluid Pressure Sensor/Switch A Circuit High",
    # OBD-II chassis / body / network
    "C0000": "Airbag System Component Error",
    "C0608": "ESC Component Error",
    "C1146": "Tire Pressure Monitoring Display Error",
    "C2136": "Side Sensor Communication Error",
    "C3298": "ESC Component Error",
    "C4008": "Front Sensor Communication Error",
    "C8000": "Airbag System Component Error",
    "B1168": "Steering Angle Sensor Error",
    "U0103": "Lost Communication With Gear Shift Module",
    "U0128": "Lost Communication With Park Brake Control Module",
    "U0428": "Invalid Data Received From Steering Angle Sensor Module",
    "U1111": "Function Restricted due to Missing Message(s)",
    "U1113": "Function Restricted due to Faults in Other Modules",
    "U1121": "Databus Missing Message",
    "U1123": "Databus Received Error Message",
    # VAG decimal
    "0295": "Steering angle sensor - Missing Calibration",
    "4716": "No Communications with Parking Brake Control Module",
    "5250": "Function Restriction due to Faults in Other Modules",
    "7150": "Implausible Data Received from Steering Angle Sensor Module",
    "7175": "Function Restricted due to Missing Message(s)",
    "8299": "Databus - Missing Message",
    "15873": "Steering angle sensor - Missing Calibration",
    "16390": "Display for Tire Pressure Monitoring - Signal Failure",
    "17158": "Databus - Received Error Message",
    "21221": "No Communications with Parking Brake Control Module",
    "25472": "No Communication with Gear Selector Module",
}


def describe(code: str) -> str | None:
    """Reference description for code, or None."""
    return KNOWN_CODE_DESCRIPTIONS.get((code or "").strip().upper())


def fallback_description(code: str) -> str:
    """Description to use when the report gives none."""
    return describe(code) or f"Error Code {code}"
