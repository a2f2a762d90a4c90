class MalformedSpecError(ValueError):
    pass


class TraceValidationError(ValueError):
    pass


class ScenarioNotFoundError(LookupError):
    def __init__(self, scenario_id: str) -> None:
        super().__init__(f"Scenario not found: {scenario_id}")
        self.scenario_id = scenario_id
