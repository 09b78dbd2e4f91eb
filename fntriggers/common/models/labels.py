from typing import Dict


class ResourceLabels:
    FUNCTION_DOMAIN: str = "serverless.kyma-project.io/"

    FUNCTION_NAME_LABEL = FUNCTION_DOMAIN + "function-name"

    FUNCTION_MANAGED_BY_LABEL = FUNCTION_DOMAIN + "managed-by"


class Labels(ResourceLabels):
    KUBERNETES_DOMAIN = "app.kubernetes.io/"

    KUBERNETES_NAME_LABEL = KUBERNETES_DOMAIN + "name"

    KUBERNETES_PART_OF_LABEL = KUBERNETES_DOMAIN + "part-of"

    KUBERNETES_MANAGED_BY_LABEL = KUBERNETES_DOMAIN + "managed-by"

    APPLICATION_NAME = "function"

    _labels: Dict[str, str]

    def __init__(self, labels: Dict[str, str] = None) -> None:
        self._labels = labels if labels else dict()

    def update(self, labels: Dict[str, str]) -> "Labels":
        self._labels.update(labels.copy())
        return self

    def as_dict(self) -> Dict[str, str]:
        """Return labels as dictionary."""
        return self._labels.copy()

    def include(self, label: str, value: str) -> "Labels":
        self.update({label: value})
        return self

    def include_function_name(self, name: str) -> "Labels":
        return self.include(self.FUNCTION_NAME_LABEL, name)

    def include_function_managed_by(self, operator_name: str) -> "Labels":
        return self.include(self.FUNCTION_MANAGED_BY_LABEL, operator_name)

    def include_kubernetes_name(self, name: str) -> "Labels":
        return self.include(self.KUBERNETES_NAME_LABEL, name)

    def include_kubernetes_part_of(self, function_name: str) -> "Labels":
        return self.include(
            self.KUBERNETES_PART_OF_LABEL,
            self.get_or_valid_label_value(f"{self.APPLICATION_NAME}-{function_name}"),
        )

    def include_kubernetes_managed_by(self, operator_name: str) -> "Labels":
        return self.include(self.KUBERNETES_MANAGED_BY_LABEL, operator_name)

    def get_or_valid_label_value(self, value: str) -> str:
        """Trim the value to a valid Label value:
        * (([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9])?
        * 63 characters max
        """
        if not value:
            return ""
        return value[:63].rstrip("-_.")

    def __str__(self):
        return f"Labels<{self._labels}>"

    @classmethod
    def generate_default_labels(
        cls,
        function_name: str,
        component_name: str,
        managed_by: str,
    ) -> "Labels":
        labels = Labels()
        return (
            labels.include_function_name(function_name)
            .include_function_managed_by(managed_by)
            .include_kubernetes_name(component_name)
            .include_kubernetes_part_of(function_name)
            .include_kubernetes_managed_by(managed_by)
        )
