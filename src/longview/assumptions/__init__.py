# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Operating Assumptions

Drivers for the projected bands: enrollment ramp-up, dual-curriculum
tuition, staff cost models, rent models and working-capital ratios.
"""

from .curriculum import (
    CurriculumConfig,
    calculate_tuition_revenue,
    grown_fee,
    validate_curriculum_config,
)
from .enrollment import EnrollmentConfig, calculate_enrollment, validate_enrollment_config
from .rent import (
    AnyRentModel,
    FixedEscalationRent,
    PartnerInvestmentRent,
    RentModel,
    RevenueShareRent,
    escalation_factor,
)
from .staff import (
    AnyStaffCostModel,
    FixedPlusVariableStaffCost,
    RatioBasedStaffCost,
    RevenuePercentStaffCost,
    StaffCostModel,
)
from .working_capital import (
    WorkingCapitalBalances,
    WorkingCapitalRatios,
    calculate_working_capital_ratios,
)

__all__ = [
    # Enrollment
    "EnrollmentConfig",
    "calculate_enrollment",
    "validate_enrollment_config",
    # Curriculum
    "CurriculumConfig",
    "calculate_tuition_revenue",
    "grown_fee",
    "validate_curriculum_config",
    # Staff
    "AnyStaffCostModel",
    "FixedPlusVariableStaffCost",
    "RatioBasedStaffCost",
    "RevenuePercentStaffCost",
    "StaffCostModel",
    # Rent
    "AnyRentModel",
    "FixedEscalationRent",
    "PartnerInvestmentRent",
    "RentModel",
    "RevenueShareRent",
    "escalation_factor",
    # Working capital
    "WorkingCapitalBalances",
    "WorkingCapitalRatios",
    "calculate_working_capital_ratios",
]
