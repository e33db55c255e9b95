import logging

from canon6.analysis.ipv6_address import IPv6Address

logger = logging.getLogger(__name__)


class IPv6Analyzer:
    # fixed IPv6 header layout
    HEADER_LENGTH = 40
    SRC_OFFSET = 8
    DST_OFFSET = 24
    ADDRESS_LENGTH = 16

    NEXT_HEADERS = {
        0: "Hop-by-Hop",
        6: "TCP",
        17: "UDP",
        43: "Routing",
        44: "Fragment",
        50: "ESP",
        51: "AH",
        58: "ICMPv6",
        59: "No Next Header",
        60: "Destination Options",
    }

    def get_next_header_name(self, next_header):
        return self.NEXT_HEADERS.get(next_header, f"Unknown({next_header})")

    def analyze(self, packet):
        if not packet.haslayer('IPv6'):
            return None

        ipv6 = packet['IPv6']
        # read the address fields off the wire instead of scapy's text form
        header = bytes(ipv6)[:self.HEADER_LENGTH]
        src_address = self.extract_address(header, self.SRC_OFFSET)
        dst_address = self.extract_address(header, self.DST_OFFSET)
        logger.debug("IPv6 %s -> %s", src_address, dst_address)

        return {
            "version": 6,
            "src_ip": src_address.canonical(),
            "dst_ip": dst_address.canonical(),
            "src_address": src_address,
            "dst_address": dst_address,
            "next_header": ipv6.nh,
            "next_header_name": self.get_next_header_name(ipv6.nh),
            "hop_limit": ipv6.hlim,
            "flow_label": ipv6.fl,
            "traffic_class": ipv6.tc,
            "payload_length": ipv6.plen,
        }

    def extract_address(self, header, offset):
        return IPv6Address.from_bytes(header[offset:offset + self.ADDRESS_LENGTH])
