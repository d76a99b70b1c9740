# Species and study-area constants

latin_name = "Papilio machaon"
common_name = "Swallowtail"

# GBIF filters on ISO 3166-1 alpha-2 codes, Natural Earth on country names
country_code = "IT"
country_name = "Italy"

occurrence_crs = "EPSG:4326"

gbif_coordinate_columns = ("decimalLongitude", "decimalLatitude")

# GBIF fields kept alongside the coordinates
gbif_record_fields = [
    "key",
    "scientificName",
    "species",
    "eventDate",
    "year",
    "basisOfRecord",
    "coordinateUncertaintyInMeters",
]
