#Imports
from dataclasses import dataclass
from datetime import date

@dataclass
class DataSource:
    """A class to hold attribution info for a single data source."""
    name: str
    attribution_template: str
    url: str
    notes: str = ""

#Central dataset for all data sources used in the slides
SOURCES = {
    "scotlands_census": DataSource(
        name="Scotland's Census 2011",
        attribution_template="Source: National Records of Scotland, Scotland's Census 2011, "
                             "licensed under the Open Government Licence v3.0. © Crown copyright {year}.",
        url="https://www.scotlandscensus.gov.uk/",
        notes="Table of National Statistics Socio-economic Classification (NS-SeC) by sex, at multi-member "
              "ward level. Provides the Female, Male and All counts for categories C1 to C8 and the "
              "Scotland aggregate row."
    ),
    "ward_boundaries": DataSource(
        name="Multi-member Ward Boundaries",
        attribution_template="Contains OS data © Crown copyright and database right {year}. "
                             "Source: Scottish Government Spatial Data, licensed under the Open Government Licence v3.0.",
        url="https://www.spatialdata.gov.scot/",
        notes="Ward polygons in British National Grid (EPSG:27700), each with its ward name and council. "
              "The ward name is the key used to join the census table."
    ),
    "osm_tiles": DataSource(
        name="OpenStreetMap / CARTO Basemap",
        attribution_template="© OpenStreetMap contributors (ODbL), © CARTO {year}.",
        url="https://carto.com/attributions",
        notes="Background tiles for the interactive maps. The tile provider is passed to the renderer explicitly."
    )
}

def generate_attribution_markdown() -> str:
    """Generates a markdown string listing attributions for all data sources."""
    current_year = date.today().year
    markdown_lines = []

    #Sort sources by name
    sorted_sources = sorted(SOURCES.items(), key=lambda item: item[1].name)

    for _, source in sorted_sources:
        formatted_attribution = source.attribution_template.format(year=current_year)
        markdown_lines.append(f"- **[{source.name}]({source.url}):** {formatted_attribution}")
    return "\n".join(markdown_lines)


#Notes shown with the attributions on the sources slide
LICENCE_NOTES = [
    "Census counts and ward boundaries are Crown copyright, released under the Open Government Licence v3.0 (OGL). "
    "Basemap tiles are OpenStreetMap data under the ODbL.",
    "The files in `data/processed` are a synthetic sample of 12 wards laid out in the published formats so the "
    "slides run offline. The counts are invented, so no finding on these slides describes real wards.",
    "NS-SeC (National Statistics Socio-economic Classification) groups people by occupation and employment status. "
    "The census table reports it as analytic classes 1 to 8, shown here as C1 to C8, with students and "
    "not-classified people left out.",
    "The equality score is derived from those counts as female / male x 100. It is a teaching measure, not an "
    "official statistic.",
]


def generate_licence_notes_markdown() -> str:
    """Generates a markdown bullet list of the general licence and data notes."""
    return "\n".join(f"- {note}" for note in LICENCE_NOTES)
