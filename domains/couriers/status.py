DEFAULT_STATUS = "Pending"
DELIVERED_STATUS = "Delivered"


def normalize_status(raw) -> str:
    """
    택배사 원문 상태 → 표시용 상태
      "in_transit"           -> "In Transit"
      "delivery-in-progress" -> "Delivery In Progress"
      ""/None                -> "Pending"
    """
    s = str(raw or "").replace("_", " ").replace("-", " ").strip()
    if not s:
        return DEFAULT_STATUS
    return " ".join(w[:1].upper() + w[1:].lower() for w in s.split(" ")).strip()


def is_delivered_status(status) -> bool:
    return normalize_status(status) == DELIVERED_STATUS
