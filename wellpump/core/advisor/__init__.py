from .advisor import AdvisorResult, PumpAdvisor, Recommendation

__all__ = ["PumpAdvisor", "AdvisorResult", "Recommendation"]
