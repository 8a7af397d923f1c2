from nvme_munin.models.nvme import ThresholdPair
from nvme_munin.services.thresholds import ThresholdResolver

DEVICE = "/dev/nvme1n1"
LABEL = "SN_S464NB0K601188N"


def test_defaults_are_used_without_overrides():
    resolver = ThresholdResolver({})

    pair = resolver.resolve("nvme_usage", DEVICE, LABEL, "95", "98")

    assert pair == ThresholdPair(warning="95", critical="98")


def test_device_name_overrides_defaults():
    resolver = ThresholdResolver(
        {
            "nvme_usage_nvme1n1_warning": "90",
            "nvme_usage_nvme1n1_critical": "96",
        }
    )

    pair = resolver.resolve("nvme_usage", DEVICE, LABEL, "95", "98")

    assert pair == ThresholdPair(warning="90", critical="96")


def test_serial_label_overrides_device_name():
    resolver = ThresholdResolver(
        {
            "nvme_usage_nvme1n1_warning": "90",
            "nvme_usage_nvme1n1_critical": "96",
            "nvme_usage_SN_S464NB0K601188N_warning": "80",
            "nvme_usage_SN_S464NB0K601188N_critical": "90",
        }
    )

    pair = resolver.resolve("nvme_usage", DEVICE, LABEL, "95", "98")

    assert pair == ThresholdPair(warning="80", critical="90")


def test_warning_and_critical_resolve_independently():
    resolver = ThresholdResolver(
        {
            "nvme_usage_nvme1n1_critical": "99",
            "nvme_usage_SN_S464NB0K601188N_warning": "85",
        }
    )

    pair = resolver.resolve("nvme_usage", DEVICE, LABEL, "95", "98")

    assert pair == ThresholdPair(warning="85", critical="99")


def test_missing_defaults_stay_undefined():
    resolver = ThresholdResolver({})

    pair = resolver.resolve("nvme_writecycles", DEVICE, LABEL)

    assert pair.warning is None
    assert pair.critical is None


def test_overrides_of_other_devices_and_metrics_are_ignored():
    resolver = ThresholdResolver(
        {
            "nvme_usage_nvme0n1_warning": "50",
            "nvme_spare_nvme1n1_warning": "20:",
            "nvme_usage_SN_OTHER_critical": "60",
        }
    )

    pair = resolver.resolve("nvme_usage", DEVICE, LABEL, "95", "98")

    assert pair == ThresholdPair(warning="95", critical="98")
