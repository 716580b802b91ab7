import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

HEALTHY_MARKER = "healthy"
LANGUAGES = ("en", "tr")
DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True)
class DiagnosticEntry:
    display_name: str
    description: str
    remedy: str


@dataclass(frozen=True)
class DiseaseProfile:
    name: str
    description: str
    remedy: str

    def for_plant(self, plant: str) -> DiagnosticEntry:
        return DiagnosticEntry(
            display_name=f"{plant_display_name(plant)} - {self.name}",
            description=self.description,
            remedy=self.remedy,
        )


class DiseaseKey(Enum):
    """Known diseases. Definition order is the match order for equal-length phrases."""

    APPLE_SCAB = "apple scab"
    BLACK_ROT = "black rot"
    CEDAR_APPLE_RUST = "cedar apple rust"
    POWDERY_MILDEW = "powdery mildew"
    EARLY_BLIGHT = "early blight"
    LATE_BLIGHT = "late blight"
    BACTERIAL_SPOT = "bacterial spot"

    @property
    def phrase(self) -> str:
        return self.value


@dataclass(frozen=True)
class DiagnosticIndex:
    language: str
    profiles: Mapping[DiseaseKey, DiseaseProfile]

    def lookup(self, key: DiseaseKey) -> DiseaseProfile:
        return self.profiles[key]


_PROFILES: dict[str, dict[DiseaseKey, DiseaseProfile]] = {
    "tr": {
        DiseaseKey.APPLE_SCAB: DiseaseProfile(
            "Elma Karalekesi",
            "Elma karalekesi, yaprak ve meyvelerde koyu lekeler oluşturan fungal bir hastalıktır.",
            "Fungisit uygulayın, budama yapın ve hava sirkülasyonunu artırın.",
        ),
        DiseaseKey.BLACK_ROT: DiseaseProfile(
            "Siyah Çürüklük",
            "Siyah çürüklük, meyve ve yapraklarda kahverengi-siyah lekeler oluşturan fungal bir hastalıktır.",
            "Etkilenen kısımları kesin, fungisit uygulayın ve temiz bahçe hijyeni sağlayın.",
        ),
        DiseaseKey.CEDAR_APPLE_RUST: DiseaseProfile(
            "Sedir Elma Pası",
            "Yapraklarda turuncu lekeler ve sporlar oluşturan fungal bir hastalıktır.",
            "Fungisit spreyi yapın ve ardıç ağaçlarını yakın çevreden uzaklaştırın.",
        ),
        DiseaseKey.POWDERY_MILDEW: DiseaseProfile(
            "Külleme",
            "Yaprak yüzeyinde beyaz pudra görünümünde fungal gelişim.",
            "Hava sirkülasyonunu artırın, fungisit uygulayın ve aşırı nemlenmeden kaçının.",
        ),
        DiseaseKey.EARLY_BLIGHT: DiseaseProfile(
            "Erken Yanıklık",
            "Yapraklarda koyu kahverengi, konsantrik halkalı lekeler oluşturan fungal hastalık.",
            "Düzenli fungisit uygulaması yapın, sulama sırasında yaprakları ıslatmaktan kaçının.",
        ),
        DiseaseKey.LATE_BLIGHT: DiseaseProfile(
            "Geç Yanıklık",
            "Yaprak ve meyvede hızla yayılan, koyu lekeler oluşturan ciddi fungal hastalık.",
            "Derhal fungisit uygulayın, etkilenen bitkileri imha edin ve hava sirkülasyonunu artırın.",
        ),
        DiseaseKey.BACTERIAL_SPOT: DiseaseProfile(
            "Bakteriyel Leke",
            "Yaprak ve meyvelerde küçük, koyu lekeler oluşturan bakteriyel enfeksiyon.",
            "Bakır bazlı bakterisit uygulayın, etkilenen kısımları temizleyin ve aşırı nemlenmeden kaçının.",
        ),
    },
    "en": {
        DiseaseKey.APPLE_SCAB: DiseaseProfile(
            "Apple Scab",
            "Apple scab is a fungal disease that leaves dark lesions on leaves and fruit.",
            "Apply a fungicide, prune the tree and improve air circulation.",
        ),
        DiseaseKey.BLACK_ROT: DiseaseProfile(
            "Black Rot",
            "Black rot is a fungal disease that causes brown to black lesions on fruit and leaves.",
            "Cut out affected parts, apply a fungicide and keep the orchard clean.",
        ),
        DiseaseKey.CEDAR_APPLE_RUST: DiseaseProfile(
            "Cedar Apple Rust",
            "A fungal disease producing orange spots and spores on the leaves.",
            "Spray a fungicide and remove nearby juniper trees.",
        ),
        DiseaseKey.POWDERY_MILDEW: DiseaseProfile(
            "Powdery Mildew",
            "White, powder-like fungal growth on the leaf surface.",
            "Improve air circulation, apply a fungicide and avoid excess moisture.",
        ),
        DiseaseKey.EARLY_BLIGHT: DiseaseProfile(
            "Early Blight",
            "A fungal disease causing dark brown leaf spots with concentric rings.",
            "Apply fungicide regularly and avoid wetting the leaves when watering.",
        ),
        DiseaseKey.LATE_BLIGHT: DiseaseProfile(
            "Late Blight",
            "A serious, fast-spreading fungal disease that leaves dark lesions on leaves and fruit.",
            "Apply fungicide immediately, destroy affected plants and improve air circulation.",
        ),
        DiseaseKey.BACTERIAL_SPOT: DiseaseProfile(
            "Bacterial Spot",
            "A bacterial infection that causes small dark spots on leaves and fruit.",
            "Apply a copper-based bactericide, remove affected parts and avoid excess moisture.",
        ),
    },
}

_HEALTHY: dict[str, DiseaseProfile] = {
    "tr": DiseaseProfile(
        "Sağlıklı",
        "Bitkide herhangi bir hastalık belirtisi tespit edilmedi. Bitki sağlıklı görünüyor.",
        "Bitkinin mevcut bakım rutinini sürdürün. Düzenli sulama, uygun gübre ve ışık koşullarını koruyun.",
    ),
    "en": DiseaseProfile(
        "Healthy",
        "No signs of disease were detected. The plant looks healthy.",
        "Keep up the current care routine: regular watering, suitable fertilizer and good light.",
    ),
}

GENERIC_DESCRIPTION: dict[str, str] = {
    "tr": "Bu hastalık hakkında detaylı bilgi mevcut değil. Genel bitki hastalığı belirtileri görülmektedir.",
    "en": "No detailed information is available for this disease. General signs of plant disease are visible.",
}

GENERIC_REMEDY: dict[str, str] = {
    "tr": "Bir tarım uzmanına danışın, etkilenen kısımları temizleyin ve uygun ilaçlama yapın.",
    "en": "Consult an agricultural expert, remove affected parts and apply a suitable treatment.",
}


def _check_language(language: str) -> str:
    if language not in LANGUAGES:
        raise ValueError(f"Unsupported language {language!r}, expected one of {LANGUAGES}")
    return language


def normalize_condition(text: str) -> str:
    """Canonical form used for matching: 'Esca_(Black_Measles)' -> 'esca black measles'."""
    text = text.replace("_", " ").replace("(", " ").replace(")", " ")
    return " ".join(text.lower().split())


def plant_display_name(plant: str) -> str:
    return " ".join(plant.replace("_", " ").split())


def is_healthy_condition(disease: str) -> bool:
    return HEALTHY_MARKER in disease.lower()


def build_diagnostic_index(language: str = DEFAULT_LANGUAGE) -> DiagnosticIndex:
    profiles = _PROFILES[_check_language(language)]
    ordered = {key: profiles[key] for key in DiseaseKey}
    return DiagnosticIndex(language=language, profiles=MappingProxyType(ordered))


def match_disease(disease: str) -> DiseaseKey | None:
    """Find the known disease named in a label's condition segment.

    Phrases match on word boundaries of the normalized segment. The longest
    matching phrase wins; equal lengths fall back to DiseaseKey order.
    """
    normalized = normalize_condition(disease)
    best = None
    for key in DiseaseKey:
        if not re.search(rf"\b{re.escape(key.phrase)}\b", normalized):
            continue
        if best is None or len(key.phrase) > len(best.phrase):
            best = key
    return best


def healthy_entry(plant: str, language: str = DEFAULT_LANGUAGE) -> DiagnosticEntry:
    return _HEALTHY[_check_language(language)].for_plant(plant)


def default_entry(plant: str, disease: str, language: str = DEFAULT_LANGUAGE) -> DiagnosticEntry:
    _check_language(language)
    condition = " ".join(disease.replace("_", " ").split())
    return DiagnosticEntry(
        display_name=f"{plant_display_name(plant)} - {condition}",
        description=GENERIC_DESCRIPTION[language],
        remedy=GENERIC_REMEDY[language],
    )
