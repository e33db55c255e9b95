from collections import Counter

IPV6_HEADER_LENGTH = 40


class AddressStatistics:
    """Running per-address counters keyed by canonical text."""

    def __init__(self):
        self.stats = {
            'ipv6': {'total': 0},
            'total_packets': 0,
            'total_bytes': 0,
        }
        self.sources = Counter()
        self.destinations = Counter()

    def update(self, packet_info):
        if not packet_info:
            return

        self.stats['total_packets'] += 1

        if packet_info.get('version') != 6:
            return

        self.stats['ipv6']['total'] += 1
        self.stats['total_bytes'] += (packet_info.get('payload_length') or 0) + IPV6_HEADER_LENGTH

        # canonical text is the key, so every spelling of an address lands together
        self.sources[packet_info['src_ip']] += 1
        self.destinations[packet_info['dst_ip']] += 1

    def unique_addresses(self):
        return set(self.sources) | set(self.destinations)

    def top_talkers(self, limit=10):
        ranked = sorted(self.sources.items(), key=lambda item: (-item[1], item[0]))
        return ranked[:limit]

    def get_summary(self):
        return {
            **self.stats,
            'unique_addresses': len(self.unique_addresses()),
            'top_sources': self.top_talkers(),
        }
