class ScenarioStoreError(Exception):
    """Base class for saved-scenario failures."""


class ScenarioNotFoundError(ScenarioStoreError, KeyError):

    def __init__(self, name):
        self.name = name
        super().__init__(f"No saved scenario named '{name}'")

    def __str__(self):
        return self.args[0]


class ScenarioLimitError(ScenarioStoreError):

    def __init__(self, limit):
        self.limit = limit
        super().__init__(f"Maximum {limit} saved scenarios allowed")


class UnknownTemplateError(KeyError):

    def __init__(self, template_id):
        self.template_id = template_id
        super().__init__(f"Unknown scenario template '{template_id}'")

    def __str__(self):
        return self.args[0]
