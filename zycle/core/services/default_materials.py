"""Default recyclable-material catalog loaded into an empty tenant catalog."""

from dataclasses import dataclass

from zycle.core.entities.material import Material


@dataclass(frozen=True)
class DefaultMaterial:
    name: str
    price: float  # base purchase price per kg
    code: str


DEFAULT_MATERIALS: tuple[DefaultMaterial, ...] = (
    # Paper and cardboard
    DefaultMaterial("ARCHIVO", 600, "201"),
    DefaultMaterial("REVISTA", 450, "207"),
    DefaultMaterial("PERIODICO", 450, "204"),
    DefaultMaterial("TETRA PAK", 200, "206"),
    DefaultMaterial("CARTON", 500, "202"),
    DefaultMaterial("CUBETA HUEVO", 100, "205"),
    DefaultMaterial("PLEGADIZA", 100, "205"),
    # Glass
    DefaultMaterial("VIDRIO CASCO", 100, "499"),
    DefaultMaterial("VIDRIO PLANO", 100, "499"),
    # Plastics
    DefaultMaterial("POLICOLOR", 300, "306"),
    DefaultMaterial("PLAST TRANS", 800, "306"),
    DefaultMaterial("PET REVUELTO", 950, "303"),
    DefaultMaterial("PET VERDE", 700, "303"),
    DefaultMaterial("PET AMBAR", 600, "303"),
    DefaultMaterial("PET ACEITE", 300, "303"),
    DefaultMaterial("PET TRANSPARENTE", 1700, "303"),
    DefaultMaterial("CLAUSEN", 6900, "101"),
    DefaultMaterial("GALONES", 1000, "307"),
    DefaultMaterial("PVC BLANDO", 400, "304"),
    DefaultMaterial("PVC TUBO", 500, "304"),
    DefaultMaterial("PVCTECHO", 300, "304"),
    DefaultMaterial("CUÑETE", 1000, "302"),
    DefaultMaterial("CANASTA", 1300, "302"),
    DefaultMaterial("PASTA", 900, "302"),
    DefaultMaterial("TATUCO", 1300, "307"),
    # Metals
    DefaultMaterial("CHATARRA", 720, "102"),
    DefaultMaterial("ACERO", 3300, "106"),
    DefaultMaterial("TAPA", 900, "302"),
    DefaultMaterial("ALUM GRUESO", 5500, "101"),
    DefaultMaterial("POTE AEROSOL", 5400, "101"),
    DefaultMaterial("ALUMI LAMINA", 6000, "101"),
    DefaultMaterial("ALUM PERFIL", 7500, "101"),
    DefaultMaterial("ANTIMONIO", 5500, "105"),
    DefaultMaterial("ALUMINIO OLLA", 6200, "101"),
    DefaultMaterial("BRONCE", 20000, "104"),
    DefaultMaterial("COBRE #2", 30000, "103"),
    DefaultMaterial("COBRE #1", 30000, "103"),
)


def default_catalog() -> list[Material]:
    """Fresh Material entities for the default catalog, all with zero stock."""
    return [
        Material(name=entry.name, price=entry.price, code=entry.code, stock=0.0)
        for entry in DEFAULT_MATERIALS
    ]
