"""
Physical Constants & Unit Conversions
=====================================
Stateless helpers used by the input layer (grains, Celsius, milliradians,
imperial ballistic coefficients) and the constants shared by the physics
modules.
"""

import math


# ── Physical constants ────────────────────────────────────────────────────
GRAVITY                = 9.80665     # m/s²
MOLAR_MASS_DRY_AIR     = 0.0289644   # kg/mol
MOLAR_MASS_WATER_VAPOR = 0.018016    # kg/mol
UNIV_GAS_CONSTANT      = 8.31447     # J/(K·mol)
ZERO_CELSIUS           = 273.15      # K

# ── Unit factors ──────────────────────────────────────────────────────────
MG_PER_GRAIN           = 64.79891
MG_PER_GRAM            = 1000.0
KG_PER_GRAM            = 0.001
KG_M2_PER_LB_IN2       = 703.0696    # 1 lb/in² expressed in kg/m²


def grains_to_grams(grains: float) -> float:
    return grains * MG_PER_GRAIN / MG_PER_GRAM


def grains_to_kg(grains: float) -> float:
    return grains_to_grams(grains) * KG_PER_GRAM


def c_to_k(celsius: float) -> float:
    return celsius + ZERO_CELSIUS


def mrad_to_rad(mrad: float) -> float:
    return mrad / 1000.0


def rad_to_mrad(rad: float) -> float:
    return rad * 1000.0


def deg_to_mrad(deg: float) -> float:
    return rad_to_mrad(math.radians(deg))


def bc_to_si(bc: float) -> float:
    """Ballistic coefficient from the published lb/in² figure to kg/m²."""
    return bc * KG_M2_PER_LB_IN2
