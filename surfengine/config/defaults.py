"""Default spot catalogue with pre-surveyed break geometry."""

from surfengine.config.schema import BottomType, SpotConfig, TidePhase, WindShelter

DEFAULT_SPOTS: list[SpotConfig] = [
    SpotConfig(
        id="itamambuca",
        name="Itamambuca",
        lat=-23.4031,
        lon=-45.0108,
        region="ubatuba",
        region_name="Ubatuba (SP)",
        beach_azimuth=140,
        ideal_approach=(120, 180),
        swell_window=(90, 220),
        shadow_blocks=[(200, 220)],
        wind_shelter=WindShelter(offshore=(290, 350), bad_onshore=(100, 180)),
        bottom_type=BottomType.BEACHBREAK,
        tide_preference=[TidePhase.MID, TidePhase.MID_HIGH],
        tide_sensitivity=0.4,
    ),
    SpotConfig(
        id="vermelha_norte",
        name="Vermelha do Norte",
        lat=-23.4177,
        lon=-45.0419,
        region="ubatuba",
        region_name="Ubatuba (SP)",
        beach_azimuth=150,
        ideal_approach=(130, 190),
        swell_window=(100, 230),
        wind_shelter=WindShelter(offshore=(300, 360), bad_onshore=(110, 190)),
        bottom_type=BottomType.BEACHBREAK,
        tide_preference=[TidePhase.MID],
    ),
    SpotConfig(
        id="maresias",
        name="Maresias",
        lat=-23.7936,
        lon=-45.5622,
        region="sao_sebastiao",
        region_name="São Sebastião (SP)",
        beach_azimuth=175,
        ideal_approach=(150, 210),
        swell_window=(120, 250),
        shadow_blocks=[(120, 135)],
        wind_shelter=WindShelter(offshore=(330, 30), bad_onshore=(140, 220)),
        bottom_type=BottomType.BEACHBREAK,
        tide_preference=[TidePhase.MID_HIGH],
        tide_sensitivity=0.6,
    ),
    SpotConfig(
        id="camburi",
        name="Camburi",
        lat=-23.7720,
        lon=-45.6420,
        region="sao_sebastiao",
        region_name="São Sebastião (SP)",
        beach_azimuth=170,
        ideal_approach=(150, 200),
        swell_window=(130, 240),
        wind_shelter=WindShelter(offshore=(320, 20), bad_onshore=(130, 210)),
        bottom_type=BottomType.BEACHBREAK,
    ),
    SpotConfig(
        id="joaquina",
        name="Joaquina",
        lat=-27.6290,
        lon=-48.4485,
        region="florianopolis",
        region_name="Florianópolis (SC)",
        beach_azimuth=100,
        ideal_approach=(90, 160),
        swell_window=(45, 200),
        wind_shelter=WindShelter(offshore=(250, 310), bad_onshore=(60, 140)),
        bottom_type=BottomType.BEACHBREAK,
        tide_preference=[TidePhase.LOW, TidePhase.MID],
    ),
    SpotConfig(
        id="barra_lagoa",
        name="Barra da Lagoa",
        lat=-27.5746,
        lon=-48.4225,
        region="florianopolis",
        region_name="Florianópolis (SC)",
        beach_azimuth=90,
        ideal_approach=(60, 130),
        swell_window=(30, 180),
        shadow_blocks=[(150, 180)],
        wind_shelter=WindShelter(offshore=(240, 300), bad_onshore=(60, 120)),
        bottom_type=BottomType.POINT,
    ),
    SpotConfig(
        id="prainha",
        name="Prainha",
        lat=-23.0411,
        lon=-43.5061,
        region="rio_de_janeiro",
        region_name="Rio de Janeiro (RJ)",
        beach_azimuth=180,
        ideal_approach=(160, 220),
        swell_window=(120, 250),
        wind_shelter=WindShelter(offshore=(330, 30), bad_onshore=(150, 220)),
        bottom_type=BottomType.BEACHBREAK,
        tide_preference=[TidePhase.MID_HIGH],
    ),
    SpotConfig(
        id="arpoador",
        name="Arpoador",
        lat=-22.9884,
        lon=-43.1925,
        region="rio_de_janeiro",
        region_name="Rio de Janeiro (RJ)",
        beach_azimuth=170,
        ideal_approach=(160, 210),
        swell_window=(130, 240),
        shadow_blocks=[(130, 150)],
        wind_shelter=WindShelter(offshore=(320, 20), bad_onshore=(120, 200)),
        bottom_type=BottomType.POINT,
        tide_preference=[TidePhase.MID],
        local_notes="Rock point, crowded on good days.",
    ),
]
