"""Constants for the alert seeding API.

Endpoint URLs and SAS keys are never stored here; they come from the
environment (see src.shared.settings).
"""

SAS_KEY_HEADER = 'aeg-sas-key'
DEFAULT_ENVIRONMENT = 'uat'
SUPPORTED_ENVIRONMENTS = ('dev', 'uat')

# Site each alert type lands on: (env var, default)
SITE_NAMES = {
    'trex_public': ('trex', 'WVRD_9th Ave and JG Strydom Rd_62'),
    'trex_private': ('trex_private', 'NGA_20481_Ramoshie_Eaton'),
    'unusual_behaviour': ('UB', 'MCLN_Berea Str and Bourke Str_20.4_A'),
    'public_lpr': ('public_lpr', 'WVRD_9th Ave and JG Strydom Rd_62'),
}

# Trex (Firefly) alerts
TREX_SUBJECT = 'iSentry Firefly Alert'
TREX_EVENT_TYPE = 'iSentry Firefly Event'
TREX_SOURCE = 'iSentry Firefly'
TREX_DATA_VERSION = '2.0'
TREX_DEVICE_ID = '116444'
TREX_CAMERA_NAME = '116444'
TREX_PRIVATE_DEVICE_ID = '123363'
TREX_PRIVATE_CAMERA_ID = '123352'
TREX_IMAGE_URL = ('https://wwwproof360coza.blob.core.windows.net/isentry-firefly-alert-images/'
                  '128237_1688624021_2023-07-06-06-13-41_9.idat.jpeg')
TREX_VIDEO_URL = ('https://wwwproof360coza.blob.core.windows.net/isentry-firefly-alert-videos/'
                  '128237_1688624021_2023-07-06-06-13-41_9.idat.mp4')

# Unusual Behaviour alerts
UB_SUBJECT = 'iSentry API'
UB_EVENT_TYPE = 'iSentry Event'
UB_DATA_VERSION = '4.0'
UB_DEVICE_ID = '7B2951D9-59AA-4651-87D4-3D27B0B9C0B9'
UB_CAMERA_NAME = 'Vicp_Opposite 25 Leighton Rd_9.2_T'
UB_ALERT_ID_INT = 267
UB_FRAME_WIDTH = 384
UB_FRAME_HEIGHT = 288
UB_IMAGE_URL = 'https://wwwproof360coza.blob.core.windows.net/isentry/e11001f382d14138a9040a7a3d8a9a5a.jpg'

# Public LPR (VOI) alerts
LPR_EVENT_TYPE = 'Vumacam.LPR.AlertDispatchedEvent'
LPR_PLATE_ID = 'TESTGP'
LPR_ORGANIZATION_ID = 100526
LPR_DEVICE_ID = 121467
LPR_LATITUDE = -26.124830
LPR_LONGITUDE = 28.082690
LPR_CASE_NUMBER = 'CAS 128/11/20'
LPR_CRIME_TYPE = 'Common Robbery'
LPR_CAMERA_NAME = 'MCLN_Berea Str and Bourke Str_20.4_A'
LPR_LEVEL_ID = '05ce87af-55c0-477e-a148-73c708a859a6'
LPR_LEVEL_TIME_CREATED = '2022-11-06T13:48:58.843Z'

METADATA_VERSION = '1'
