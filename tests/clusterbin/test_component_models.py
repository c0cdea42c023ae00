"""
Tests for the component registry models.
"""

import pytest
from pydantic import ValidationError

from clusterbin.clusterbin_exceptions import ComponentNotFoundError
from clusterbin.component_models import ComponentDescriptor, ComponentRegistry, clean_version


class TestComponentRegistry:
    """Tests for the bundled ComponentRegistry."""

    @pytest.fixture
    def registry(self):
        return ComponentRegistry.default()

    def test_load_default_registry(self, registry):
        assert registry.description is not None
        assert registry.names() == [
            "kubeadm",
            "kubelet",
            "kubectl",
            "runc",
            "containerd",
            "crictl",
            "cilium",
            "helm",
        ]

    def test_names_are_filled_from_keys(self, registry):
        for name in registry.names():
            assert registry.lookup(name).name == name

    def test_lookup_unknown_component(self, registry):
        with pytest.raises(ComponentNotFoundError):
            registry.lookup("etcd")

    def test_two_slot_components(self, registry):
        two_slot = {name for name in registry.names() if registry.lookup(name).slots == 2}
        assert two_slot == {"containerd", "crictl"}

    def test_single_slot_urls(self, registry):
        kubeadm = registry.lookup("kubeadm")
        assert kubeadm.download_url("v1.29.2") == (
            "https://dl.k8s.io/release/v1.29.2/bin/linux/amd64/kubeadm"
        )
        assert kubeadm.checksum_url("v1.29.2") == (
            "https://dl.k8s.io/release/v1.29.2/bin/linux/amd64/kubeadm.sha256"
        )

    def test_two_slot_urls_use_clean_version(self, registry):
        containerd = registry.lookup("containerd")
        assert containerd.download_url("v1.7.0") == (
            "https://github.com/containerd/containerd/releases/download/"
            "v1.7.0/containerd-1.7.0-linux-amd64.tar.gz"
        )
        assert containerd.checksum_url("v1.7.0").endswith(
            "/v1.7.0/containerd-1.7.0-linux-amd64.tar.gz.sha256sum"
        )

        crictl = registry.lookup("crictl")
        assert crictl.download_url("v1.29.0").endswith(
            "/v1.29.0/crictl-v1.29.0-linux-amd64.tar.gz"
        )

    def test_helm_is_served_outside_github(self, registry):
        helm = registry.lookup("helm")
        assert helm.download_url("v3.14.2") == "https://get.helm.sh/helm-v3.14.2-linux-amd64.tar.gz"

    @pytest.mark.parametrize(
        "name, target",
        [
            ("kubeadm", "kubeadm"),
            ("kubelet", "kubelet"),
            ("runc", "runc.amd64"),
            ("containerd", "containerd-1.7.0-linux-amd64.tar.gz"),
            ("crictl", "crictl-v1.7.0-linux-amd64.tar.gz"),
            ("cilium", "cilium-linux-amd64.tar.gz"),
            ("helm", "helm-v1.7.0-linux-amd64.tar.gz"),
        ],
    )
    def test_target_filenames(self, registry, name, target):
        assert registry.lookup(name).target_filename("v1.7.0") == target

    def test_final_filenames(self, registry):
        finals = {name: registry.lookup(name).final_filename() for name in registry.names()}
        assert finals["containerd"] == "containerd.tar.gz"
        for name in ("kubeadm", "kubelet", "kubectl", "runc", "crictl", "cilium", "helm"):
            assert finals[name] == name


class TestComponentDescriptor:
    """Tests for ComponentDescriptor validation."""

    def test_populate_by_field_name(self):
        descriptor = ComponentDescriptor(
            name="tool",
            version_url="https://example.com/stable.txt",
            url_pattern="https://example.com/%s/tool",
            hash_url="https://example.com/%s/tool.sha256",
        )
        assert descriptor.download_url("1.0") == "https://example.com/1.0/tool"
        assert descriptor.target_filename("1.0") == "tool"

    def test_slot_count_must_match_templates(self):
        with pytest.raises(ValidationError):
            ComponentDescriptor(
                name="tool",
                versionUrl="https://example.com/stable.txt",
                urlPattern="https://example.com/%s/tool-%s",
                hashUrl="https://example.com/%s/tool.sha256",
                slots=1,
            )

    def test_descriptor_is_immutable(self):
        descriptor = ComponentRegistry.default().lookup("kubectl")
        with pytest.raises(ValidationError):
            descriptor.url_pattern = "https://evil.example.com/%s"

    def test_registry_from_dict(self):
        registry = ComponentRegistry(
            **{
                "components": {
                    "tool": {
                        "versionUrl": "https://example.com/stable.txt",
                        "urlPattern": "https://example.com/%s/tool-%s.tgz",
                        "hashUrl": "https://example.com/%s/tool-%s.tgz.sha256",
                        "slots": 2,
                        "targetName": "tool-{clean_version}.tgz",
                        "finalName": "{name}.tgz",
                    }
                }
            }
        )
        tool = registry.lookup("tool")
        assert tool.download_url("v2.0") == "https://example.com/v2.0/tool-2.0.tgz"
        assert tool.target_filename("v2.0") == "tool-2.0.tgz"
        assert tool.final_filename("v2.0") == "tool.tgz"


@pytest.mark.parametrize(
    "version, expected",
    [("v1.29.2", "1.29.2"), ("1.7.0", "1.7.0"), ("vv1", "v1"), ("", "")],
)
def test_clean_version(version, expected):
    assert clean_version(version) == expected
